from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from models.decision import EvaluateRequest
from services.auth import get_current_actor
from services.evaluator import evaluate

router = APIRouter()


@router.post("/evaluate")
async def evaluate_endpoint(request: EvaluateRequest, actor=Depends(get_current_actor)):
    """Dry-run a mutation; nothing is read from or written to the store."""
    try:
        decision = evaluate(actor, request.operation, request.kind, request.path,
                            existing=request.existing, incoming=request.incoming, parent=request.parent)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return JSONResponse(status_code=200, content={"decision": jsonable_encoder(decision)})
