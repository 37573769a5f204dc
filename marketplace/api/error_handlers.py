"""Exception handlers for the FastAPI app."""

from __future__ import annotations

from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from marketplace.ledger.errors import (
    InsufficientFundsError,
    InvalidStateError,
    LedgerError,
    LedgerValidationError,
    PayoutOverflowError,
    TokenNotFoundError,
    UnauthorizedError,
)

LEDGER_ERROR_STATUS: Dict[Type[LedgerError], int] = {
    TokenNotFoundError: 404,
    UnauthorizedError: 403,
    InvalidStateError: 409,
    InsufficientFundsError: 402,
    LedgerValidationError: 400,
    PayoutOverflowError: 409,
}


def _status_for(exc: LedgerError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in LEDGER_ERROR_STATUS:
            return LEDGER_ERROR_STATUS[error_type]
    return 400


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:  # noqa: WPS430
        return JSONResponse(status_code=_status_for(exc), content={"detail": str(exc), "error": exc.code})
