"""Marketplace service: runs ledger calls on a database session."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from marketplace.core.config import AppSettings, get_settings
from marketplace.events_engine import EventDispatcher, get_event_dispatcher
from marketplace.ledger import CallContext, Ledger, LedgerOutcome
from marketplace.ledger.types import BurnResult, BuyResult, LedgerState, Metadata, MintResult, PriceResult, TokenRecord
from marketplace.schemas.token import MintBatchRequest, MintUniqueRequest
from marketplace.services.token_store import SqlAlchemyTokenRepository
from marketplace.services.transfers import RecordingTransferExecutor, TransferExecutor


class MarketplaceService:
    """Applies the transfers and events produced by each ledger call."""

    def __init__(
        self,
        session: Session,
        settings: Optional[AppSettings] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
        transfer_executor: Optional[TransferExecutor] = None,
    ) -> None:
        settings = settings or get_settings()
        self._session = session
        self._repository = SqlAlchemyTokenRepository(
            session,
            owner_id=settings.marketplace_owner_id,
            transaction_fee_bps=settings.initial_transaction_fee_bps,
        )
        self._ledger = Ledger(self._repository, storage_byte_cost=settings.storage_byte_cost)
        self._events = event_dispatcher or get_event_dispatcher()
        self._transfers = transfer_executor or RecordingTransferExecutor(session)
        self._logger = logging.getLogger("marketplace.services.marketplace")

    def ensure_ledger_state(self) -> LedgerState:
        return self._repository.ensure_state()

    def mint_batch(self, payload: MintBatchRequest, ctx: CallContext) -> MintResult:
        outcome = self._ledger.mint_batch(
            ctx,
            metadata=payload.metadata.to_record(),
            receiver_id=payload.receiver_id,
            count=payload.count,
            price=payload.price,
            royalty=payload.royalty,
            splitpayments=payload.split_payment,
        )
        return self._settle("mint", outcome, ctx)

    def mint_unique(self, payload: MintUniqueRequest, ctx: CallContext) -> MintResult:
        outcome = self._ledger.mint_unique(
            ctx,
            metadata=[item.to_record() for item in payload.metadata],
            receiver_id=payload.receiver_id,
            count=payload.count,
            prices=payload.prices,
            royalty=payload.royalty,
            splitpayments=payload.split_payment,
        )
        return self._settle("mint_unique", outcome, ctx)

    def buy(
        self,
        token_id: int,
        ctx: CallContext,
        *,
        memo: Optional[str] = None,
        art_id: Optional[str] = None,
    ) -> BuyResult:
        outcome = self._ledger.buy(ctx, token_id, memo=memo, art_id=art_id)
        return self._settle("buy", outcome, ctx, token_id=token_id)

    def burn(self, token_id: int, ctx: CallContext, *, art_id: Optional[str] = None) -> BurnResult:
        outcome = self._ledger.burn(ctx, token_id, art_id=art_id)
        return self._settle("burn", outcome, ctx, token_id=token_id)

    def update_price(
        self,
        token_id: int,
        new_price: int,
        ctx: CallContext,
        *,
        art_id: Optional[str] = None,
    ) -> PriceResult:
        outcome = self._ledger.update_price(ctx, token_id, new_price, art_id=art_id)
        return self._settle("update_price", outcome, ctx, token_id=token_id)

    def set_transaction_fee(self, fee_bps: int, ctx: CallContext) -> int:
        outcome = self._ledger.set_transaction_fee(ctx, fee_bps)
        return self._settle("set_transaction_fee", outcome, ctx)

    def get_transaction_fee(self, ctx: CallContext) -> int:
        return self._ledger.get_transaction_fee(ctx)

    def get_token(self, token_id: int) -> Tuple[TokenRecord, Metadata]:
        return self._ledger.get_token(token_id)

    def tokens_for_owner(self, owner_id: str) -> List[int]:
        return self._ledger.tokens_for_owner(owner_id)

    def supply(self) -> Tuple[int, int]:
        return self._ledger.supply()

    def _settle(self, operation: str, outcome: LedgerOutcome, ctx: CallContext, *, token_id: Optional[int] = None):
        if outcome.transfers:
            self._transfers.execute(outcome.transfers, operation=operation, token_id=token_id)
        for event in outcome.events:
            self._events.publish_nft_event(self._session, event, correlation_id=f"{operation}:{ctx.caller_id}")
        self._logger.info(
            "ledger_call_settled",
            extra={
                "operation": operation,
                "caller_id": ctx.caller_id,
                "token_id": token_id,
                "transfers": len(outcome.transfers),
                "events": len(outcome.events),
            },
        )
        return outcome.result
