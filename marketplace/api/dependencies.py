"""Dependency injection helpers for FastAPI routes."""

from __future__ import annotations

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from marketplace.core.database import get_session
from marketplace.events_engine import get_event_dispatcher
from marketplace.ledger import CallContext
from marketplace.services.marketplace import MarketplaceService


def get_db_session() -> Session:
    yield from get_session()


def get_marketplace_service(session: Session = Depends(get_db_session)) -> MarketplaceService:
    return MarketplaceService(session, event_dispatcher=get_event_dispatcher())


def get_call_context(
    x_account_id: str = Header(..., alias="X-Account-Id"),
    x_attached_deposit: int = Header(default=0, alias="X-Attached-Deposit", ge=0),
) -> CallContext:
    """Caller identity and attached funds, as relayed by the settlement gateway."""

    return CallContext(caller_id=x_account_id, attached_deposit=x_attached_deposit)
