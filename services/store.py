"""Storage boundary: every write passes the evaluator before it reaches MongoDB.

Records live in one collection keyed by their full path::

    {"_id": path, "kind": ..., "parent": parent path or None, "rev": n, "data": {...}}

The snapshot handed to the evaluator is the one read here, and the write is
conditional on ``rev`` still matching it, so a concurrent writer makes this write
fail as a whole instead of landing on top of a document that was never judged.
"""
from datetime import datetime, timezone
from typing import Any, NamedTuple, Optional

from loguru import logger
from pymongo.errors import DuplicateKeyError

from models.decision import Decision
from models.document import Actor, Operation, is_server_sentinel
from services.database import get_db
from services.evaluator import evaluate
from services.paths import DocumentPath, parse_path


class WriteConflict(Exception):
    pass


class WriteResult(NamedTuple):
    operation: Operation
    decision: Decision
    document: Optional[dict] = None


def server_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def resolve_server_timestamps(value: Any, now: str) -> Any:
    if is_server_sentinel(value):
        return now
    if isinstance(value, dict):
        return {key: resolve_server_timestamps(item, now) for key, item in value.items()}
    if isinstance(value, list):
        return [resolve_server_timestamps(item, now) for item in value]
    return value


async def _load(path: str) -> Optional[dict]:
    return await get_db().documents.find_one({"_id": path})


async def get_document(path: str) -> Optional[dict]:
    record = await _load(parse_path(path).path)
    return record["data"] if record else None


async def _load_parent(location: DocumentPath) -> Optional[dict]:
    if location.parent_path is None:
        return None
    record = await _load(location.parent_path)
    return record["data"] if record else None


async def apply_write(actor: Optional[Actor], path: str, payload: Any, merge: bool = False) -> WriteResult:
    location = parse_path(path)
    record = await _load(location.path)
    # the parent is read without a revision guard; a membership change landing after
    # this read is not detected by the conditional write below
    parent = await _load_parent(location)

    existing = record["data"] if record else None
    operation = Operation.UPDATE if record else Operation.CREATE
    incoming = payload
    if merge and existing is not None and isinstance(payload, dict):
        incoming = {**existing, **payload}

    decision = evaluate(actor, operation, location.kind, location, existing, incoming, parent)
    if not decision.allowed:
        return WriteResult(operation, decision)

    data = resolve_server_timestamps(incoming, server_now())
    collection = get_db().documents
    if record is None:
        try:
            await collection.insert_one({
                "_id": location.path,
                "kind": location.kind.value,
                "parent": location.parent_path,
                "rev": 1,
                "data": data,
            })
        except DuplicateKeyError:
            logger.warning(f"Create raced on {location.path}")
            raise WriteConflict(f"{location.path} was created concurrently")
    else:
        result = await collection.replace_one(
            {"_id": location.path, "rev": record["rev"]},
            {
                "kind": location.kind.value,
                "parent": location.parent_path,
                "rev": record["rev"] + 1,
                "data": data,
            },
        )
        if result.matched_count == 0:
            logger.warning(f"Update raced on {location.path} at rev {record['rev']}")
            raise WriteConflict(f"{location.path} changed since it was read")

    logger.info(f"Committed {operation.value} on {location.path} by {actor.uid}")
    return WriteResult(operation, decision, data)


async def apply_delete(actor: Optional[Actor], path: str) -> Optional[WriteResult]:
    """Delete the document at ``path``; returns None when there is nothing to delete."""
    location = parse_path(path)
    record = await _load(location.path)
    if record is None:
        return None
    parent = await _load_parent(location)

    decision = evaluate(actor, Operation.DELETE, location.kind, location, existing=record["data"], parent=parent)
    if not decision.allowed:
        return WriteResult(Operation.DELETE, decision)

    result = await get_db().documents.delete_one({"_id": location.path, "rev": record["rev"]})
    if result.deleted_count == 0:
        logger.warning(f"Delete raced on {location.path} at rev {record['rev']}")
        raise WriteConflict(f"{location.path} changed since it was read")

    logger.info(f"Committed delete on {location.path} by {actor.uid}")
    return WriteResult(Operation.DELETE, decision, record["data"])
