"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from marketplace.api.error_handlers import register_exception_handlers
from marketplace.api.routers import get_api_router
from marketplace.core.config import AppSettings, get_settings
from marketplace.core.database import session_scope
from marketplace.core.logging import configure_logging
from marketplace.services.marketplace import MarketplaceService

logger = logging.getLogger("marketplace.main")


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: D401
    """Create the ledger-state row before serving the first call."""

    settings: AppSettings = app.state.settings
    with session_scope() as session:
        state = MarketplaceService(session, settings=settings).ensure_ledger_state()

    logger.info(
        "ledger_ready",
        extra={
            "marketplace_owner_id": state.owner_id,
            "tokens_minted": state.tokens_minted,
            "transaction_fee_bps": state.transaction_fee_bps,
            "environment": settings.environment,
        },
    )
    yield


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build the ledger API."""

    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="NFT Marketplace Ledger",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app)
    app.include_router(get_api_router())
    return app


app = create_app()
