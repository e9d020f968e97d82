import os
import sys
from copy import deepcopy
from datetime import timedelta
from types import SimpleNamespace

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from main import app
from httpx import ASGITransport, AsyncClient
from pymongo.errors import DuplicateKeyError
from services.auth import create_access_token
from core.config import ACCESS_TOKEN_EXPIRE_MINUTES

OWNER = "owner-uid"
EDITOR = "editor-uid"
VIEWER = "viewer-uid"
STRANGER = "stranger-uid"

LIBRARY_ID = "dc2334cd-23f5-4efa-8b30-8db1e68c020b"
LIBRARY_PATH = f"users/{OWNER}/libraries/{LIBRARY_ID}"


def library_item(**overrides):
    item = {
        "libraryId": LIBRARY_ID,
        "gameId": "277f5fbb-efcd-4c9d-a62c-09f3ec396ea6",
        "gameName": "Res Arcana",
        "gameThumbnail": None,
        "gameYear": 2019,
        "status": "owned",
        "quantity": 1,
        "favorite": False,
        "playCount": 0,
        "forTrade": False,
        "forSale": False,
        "myRating": 0.5,
        "notes": "aaa",
        "createdAt": "2026-01-05T00:22:10.193Z",
        "updatedAt": {"_methodName": "serverTimestamp"},
    }
    item.update(overrides)
    return item


def base_tournament(**overrides):
    tournament = {
        "name": "Test",
        "format": "accumulative",
        "players": [
            {"id": "p1", "name": "A", "color": "#ef4444"},
            {"id": "p2", "name": "B", "color": "#3b82f6"},
        ],
        "gameSessions": [],
        "state": "active",
        "date": "2026-01-01T00:00:00.000Z",
        "ownerId": OWNER,
        "memberIds": [OWNER],
        "memberRoles": {OWNER: "owner"},
        "createdAt": "2026-01-01T00:00:00.000Z",
        "updatedAt": {"_methodName": "serverTimestamp"},
        "ownerName": "Owner",
    }
    tournament.update(overrides)
    return tournament


def shared_tournament(**overrides):
    return base_tournament(**{
        "memberIds": [OWNER, EDITOR, VIEWER],
        "memberRoles": {OWNER: "owner", EDITOR: "editor", VIEWER: "viewer"},
        **overrides,
    })


def bracket_config(**overrides):
    config = {
        "gameTitle": "Chess",
        "totalRounds": 1,
        "currentRound": 1,
        "hasStarted": False,
        "bracket": [
            {
                "id": "r1m0",
                "round": 1,
                "matchNumber": 0,
                "player1Id": "p1",
                "player2Id": "p2",
                "isComplete": False,
            },
        ],
    }
    config.update(overrides)
    return config


def game_session(tournament_id="t2", **overrides):
    session = {
        "tournamentId": tournament_id,
        "gameName": "Catan",
        "gameType": "ffa",
        "preset": "quick",
        "scoringRules": {"first": 3, "second": 2, "third": 1, "others": 0},
        "participants": ["p1", "p2"],
        "results": [],
        "createdAt": "2026-01-01T00:00:00.000Z",
        "updatedAt": "2026-01-01T00:00:00.000Z",
    }
    session.update(overrides)
    return session


def auth_headers(uid):
    token = create_access_token(data={"sub": uid}, expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    return {"Authorization": f"Bearer {token}"}


class FakeDocuments:
    """In-memory stand-in for the ``documents`` collection, keyed by ``_id``."""

    def __init__(self):
        self.records = {}

    async def find_one(self, selector):
        record = self.records.get(selector["_id"])
        return deepcopy(record) if record else None

    async def insert_one(self, record):
        if record["_id"] in self.records:
            raise DuplicateKeyError("duplicate key")
        self.records[record["_id"]] = deepcopy(record)

    async def replace_one(self, selector, replacement):
        current = self.records.get(selector["_id"])
        if current is None or current["rev"] != selector["rev"]:
            return SimpleNamespace(matched_count=0)
        self.records[selector["_id"]] = {"_id": selector["_id"], **deepcopy(replacement)}
        return SimpleNamespace(matched_count=1)

    async def delete_one(self, selector):
        current = self.records.get(selector["_id"])
        if current is None or current["rev"] != selector["rev"]:
            return SimpleNamespace(deleted_count=0)
        del self.records[selector["_id"]]
        return SimpleNamespace(deleted_count=1)

    def seed(self, path, data, rev=1, kind="tournament", parent=None):
        self.records[path] = {"_id": path, "kind": kind, "parent": parent, "rev": rev, "data": deepcopy(data)}


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def documents(monkeypatch):
    collection = FakeDocuments()
    monkeypatch.setattr("services.store.get_db", lambda: SimpleNamespace(documents=collection))
    return collection


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
