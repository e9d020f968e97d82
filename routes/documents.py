from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from services.auth import get_current_actor
from services.paths import InvalidPath
from services.store import WriteConflict, WriteResult, apply_delete, apply_write

router = APIRouter()

DENIAL_STATUS = {
    "unauthenticated": 401,
    "unauthorized": 403,
    "schemaViolation": 422,
    "immutableFieldChanged": 422,
    "referentialIntegrityViolation": 422,
}


def write_response(result: WriteResult, **extra) -> JSONResponse:
    decision = result.decision
    if not decision.allowed:
        return JSONResponse(status_code=DENIAL_STATUS[decision.reason],
                            content={"decision": jsonable_encoder(decision)})
    return JSONResponse(status_code=200, content={
        "operation": result.operation.value,
        "decision": jsonable_encoder(decision),
        "document": jsonable_encoder(result.document),
        **extra,
    })


async def guarded_write(actor, path: str, payload: Any, merge: bool = False) -> WriteResult:
    try:
        return await apply_write(actor, path, payload, merge=merge)
    except InvalidPath as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WriteConflict as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/documents/{path:path}")
async def write_document(path: str, payload: Any = Body(...), merge: bool = False,
                         actor=Depends(get_current_actor)):
    result = await guarded_write(actor, path, payload, merge=merge)
    return write_response(result)


@router.delete("/documents/{path:path}")
async def delete_document(path: str, actor=Depends(get_current_actor)):
    try:
        result = await apply_delete(actor, path)
    except InvalidPath as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WriteConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail="No document at this path")
    return write_response(result)
