"""Public ledger operations."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple

from marketplace.ledger import deposits
from marketplace.ledger.accounts import ensure_account_id
from marketplace.ledger.deposits import DepositGovernor
from marketplace.ledger.errors import InsufficientFundsError, InvalidStateError, UnauthorizedError
from marketplace.ledger.minting import mint_tokens, validate_batch_size, validate_price
from marketplace.ledger.payout import compute_payout
from marketplace.ledger.registry import TokenRegistry
from marketplace.ledger.repository import TokenRepository
from marketplace.ledger.types import (
    BurnResult,
    BuyResult,
    CallContext,
    EventKind,
    LedgerOutcome,
    LedgerState,
    Metadata,
    MintResult,
    NftEvent,
    PriceResult,
    TokenId,
    TokenRecord,
)

logger = logging.getLogger("marketplace.ledger")


class Ledger:
    """
    Ownership-and-payout ledger of the marketplace.

    Each public operation runs inside one repository transaction: the ledger
    state is loaded, mutated and saved only if the whole call succeeds.
    Operations do not move funds or publish events themselves; they return
    a LedgerOutcome carrying the transfer instructions and domain events for
    the caller to apply.
    """

    def __init__(self, repository: TokenRepository, *, storage_byte_cost: int) -> None:
        self._repository = repository
        self._governor = DepositGovernor(storage_byte_cost)

    @contextmanager
    def _call(self) -> Iterator[Tuple[LedgerState, TokenRegistry]]:
        with self._repository.transaction():
            state = self._repository.load_state()
            yield state, TokenRegistry(self._repository, state)
            self._repository.save_state(state)

    def mint_batch(
        self,
        ctx: CallContext,
        *,
        metadata: Metadata,
        receiver_id: str,
        count: int,
        price: Optional[int] = None,
        royalty: Optional[Mapping[str, int]] = None,
        splitpayments: Optional[Mapping[str, int]] = None,
    ) -> LedgerOutcome[MintResult]:
        """Mint ``count`` tokens sharing one metadata record and one price."""

        deposits.assert_at_least_one_unit(ctx)
        validate_batch_size(count)
        return self._mint(
            ctx,
            receiver_id=receiver_id,
            count=count,
            metadata=[metadata] * count,
            prices=[price] * count,
            royalty=royalty,
            splitpayments=splitpayments,
            echo_metadata=False,
        )

    def mint_unique(
        self,
        ctx: CallContext,
        *,
        metadata: Sequence[Metadata],
        receiver_id: str,
        count: int,
        prices: Sequence[Optional[int]],
        royalty: Optional[Mapping[str, int]] = None,
        splitpayments: Optional[Mapping[str, int]] = None,
    ) -> LedgerOutcome[MintResult]:
        """Mint ``count`` tokens, each with its own metadata and price."""

        deposits.assert_at_least_one_unit(ctx)
        return self._mint(
            ctx,
            receiver_id=receiver_id,
            count=count,
            metadata=metadata,
            prices=prices,
            royalty=royalty,
            splitpayments=splitpayments,
            echo_metadata=True,
        )

    def _mint(
        self,
        ctx: CallContext,
        *,
        receiver_id: str,
        count: int,
        metadata: Sequence[Metadata],
        prices: Sequence[Optional[int]],
        royalty: Optional[Mapping[str, int]],
        splitpayments: Optional[Mapping[str, int]],
        echo_metadata: bool,
    ) -> LedgerOutcome[MintResult]:
        with self._call() as (state, registry):
            usage_before = state.storage_usage
            result, events = mint_tokens(
                registry,
                state,
                receiver_id=receiver_id,
                count=count,
                metadata=metadata,
                prices=prices,
                royalty=royalty,
                splitpayments=splitpayments,
            )
            refund = self._governor.settle_storage(ctx, state.storage_usage - usage_before)

        if echo_metadata:
            result = MintResult(
                last_id=result.last_id,
                ids=result.ids,
                owner_id=result.owner_id,
                metadata=[dict(item) for item in metadata],
            )
        return LedgerOutcome(result=result, events=events, transfers=[refund] if refund else [])

    def buy(
        self,
        ctx: CallContext,
        token_id: TokenId,
        *,
        memo: Optional[str] = None,
        art_id: Optional[str] = None,
    ) -> LedgerOutcome[BuyResult]:
        """Sell ``token_id`` to the caller at its listed price."""

        buyer_id = ensure_account_id(ctx.caller_id)
        with self._call() as (state, registry):
            usage_before = state.storage_usage
            previous = registry.get(token_id)
            if previous.owner_id == buyer_id:
                raise InvalidStateError("Cannot buy a token you already own")
            if previous.price is None:
                raise InvalidStateError(f"Token {token_id} is not for sale")
            price = previous.price
            if ctx.attached_deposit < price:
                raise InsufficientFundsError(f"Attached deposit is less than the price {price}")

            plan = compute_payout(
                previous,
                price=price,
                fee_bps=deposits.current_commission_bps(state),
                treasury_id=state.owner_id,
            )

            registry.replace(
                previous,
                TokenRecord(
                    token_id=token_id,
                    owner_id=buyer_id,
                    price=previous.price,
                    royalty=dict(previous.royalty),
                    splitpayments={},
                    approved_account_ids={},
                    next_approval_id=previous.next_approval_id,
                ),
            )
            refund = self._governor.settle_purchase(ctx, state.storage_usage - usage_before, price)

        logger.info(
            "token_sold",
            extra={
                "token_id": token_id,
                "seller_id": previous.owner_id,
                "buyer_id": buyer_id,
                "price": str(price),
                "commission": str(plan.commission),
                "distributed_bps": plan.distributed_bps,
            },
        )
        transfers = list(plan.instructions)
        if refund:
            transfers.append(refund)
        event = NftEvent(
            kind=EventKind.TRANSFER,
            token_ids=[token_id],
            old_owner_id=previous.owner_id,
            new_owner_id=buyer_id,
            memo=memo,
        )
        return LedgerOutcome(
            result=BuyResult(token_id=token_id, new_owner=buyer_id, art_id=art_id),
            events=[event],
            transfers=transfers,
        )

    def burn(self, ctx: CallContext, token_id: TokenId, *, art_id: Optional[str] = None) -> LedgerOutcome[BurnResult]:
        deposits.assert_one_unit(ctx)
        with self._call() as (_state, registry):
            record = registry.get(token_id)
            if record.owner_id != ctx.caller_id:
                raise UnauthorizedError("Only the token owner may burn it")
            registry.delete(record)

        logger.info("token_burned", extra={"token_id": token_id, "owner_id": record.owner_id})
        event = NftEvent(kind=EventKind.BURN, token_ids=[token_id], owner_id=record.owner_id)
        return LedgerOutcome(result=BurnResult(token_id=token_id, art_id=art_id), events=[event])

    def update_price(
        self,
        ctx: CallContext,
        token_id: TokenId,
        new_price: int,
        *,
        art_id: Optional[str] = None,
    ) -> LedgerOutcome[PriceResult]:
        deposits.assert_one_unit(ctx)
        price = validate_price(new_price)
        with self._call() as (_state, registry):
            record = registry.get(token_id)
            if record.owner_id != ctx.caller_id:
                raise UnauthorizedError("Only the token owner may update its price")
            updated = TokenRecord(
                token_id=record.token_id,
                owner_id=record.owner_id,
                price=price,
                royalty=record.royalty,
                splitpayments=record.splitpayments,
                approved_account_ids=record.approved_account_ids,
                next_approval_id=record.next_approval_id,
            )
            registry.replace(record, updated)

        logger.info("token_price_updated", extra={"token_id": token_id, "price": str(price)})
        return LedgerOutcome(result=PriceResult(token_id=token_id, new_price=price, art_id=art_id))

    def set_transaction_fee(self, ctx: CallContext, fee_bps: int) -> LedgerOutcome[int]:
        with self._call() as (state, _registry):
            deposits.set_transaction_fee(state, ctx, fee_bps)
        return LedgerOutcome(result=fee_bps)

    def get_transaction_fee(self, ctx: CallContext) -> int:
        return deposits.get_transaction_fee(self._repository.load_state(), ctx)

    def get_token(self, token_id: TokenId) -> Tuple[TokenRecord, Metadata]:
        registry = TokenRegistry(self._repository, self._repository.load_state())
        return registry.get(token_id), registry.metadata(token_id)

    def tokens_for_owner(self, owner_id: str) -> List[TokenId]:
        return self._repository.tokens_for_owner(owner_id)

    def supply(self) -> Tuple[int, int]:
        """Return the number of live tokens and the number ever minted."""

        return self._repository.count_tokens(), self._repository.load_state().tokens_minted

    def state(self) -> LedgerState:
        return self._repository.load_state()
