"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.api.dependencies import get_db_session
from marketplace.models.ledger_state import LEDGER_STATE_ID, LedgerStateRecord

router = APIRouter()


@router.get("/healthz", summary="Liveness probe")
def health_check() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz", summary="Readiness probe")
def readiness_check(session: Session = Depends(get_db_session)) -> JSONResponse:
    """Ready once the database answers and the ledger-state row exists."""

    try:
        session.execute(text("SELECT 1"))
        state = session.get(LedgerStateRecord, LEDGER_STATE_ID)
    except SQLAlchemyError:
        return JSONResponse(status_code=503, content={"status": "unavailable", "reason": "database"})

    if state is None:
        return JSONResponse(status_code=503, content={"status": "unavailable", "reason": "ledger_state_missing"})
    return JSONResponse(status_code=200, content={"status": "ready", "tokens_minted": state.tokens_minted})
