from typing import Any

from fastapi import APIRouter, Body, Depends
from models.tournament import default_scoring
from routes.documents import guarded_write, write_response
from services.auth import get_current_actor
from services.database import default_id
from services.paths import game_session_path, tournament_path

router = APIRouter()


@router.post("/tournaments")
async def create_tournament_endpoint(payload: Any = Body(...), actor=Depends(get_current_actor)):
    tournament_id = default_id()
    result = await guarded_write(actor, tournament_path(tournament_id), payload)
    return write_response(result, id=tournament_id)


@router.post("/tournaments/{tournament_id}/gameSessions")
async def create_game_session_endpoint(tournament_id: str, payload: Any = Body(...),
                                       actor=Depends(get_current_actor)):
    if isinstance(payload, dict) and payload.get("scoringRules") is None and isinstance(payload.get("preset"), str):
        scoring = default_scoring(payload["preset"])
        if scoring is not None:
            payload = {**payload, "scoringRules": scoring}
    session_id = default_id()
    result = await guarded_write(actor, game_session_path(tournament_id, session_id), payload)
    return write_response(result, id=session_id)
