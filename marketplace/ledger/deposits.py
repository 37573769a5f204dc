"""Fee and storage-deposit governor."""

from __future__ import annotations

import logging
from typing import Optional

from marketplace.ledger.accounts import BPS_DENOMINATOR
from marketplace.ledger.errors import InsufficientFundsError, LedgerValidationError, UnauthorizedError
from marketplace.ledger.types import CallContext, LedgerState, TransferInstruction, TransferKind

ONE_UNIT = 1

logger = logging.getLogger("marketplace.ledger.deposits")


def assert_one_unit(ctx: CallContext) -> None:
    """Require exactly one smallest unit attached, confirming the caller's intent."""

    if ctx.attached_deposit != ONE_UNIT:
        raise InsufficientFundsError(f"Requires attached deposit of exactly {ONE_UNIT} unit")


def assert_at_least_one_unit(ctx: CallContext) -> None:
    if ctx.attached_deposit < ONE_UNIT:
        raise InsufficientFundsError(f"Requires attached deposit of at least {ONE_UNIT} unit")


def assert_marketplace_owner(state: LedgerState, ctx: CallContext) -> None:
    if ctx.caller_id != state.owner_id:
        raise UnauthorizedError("Only the marketplace owner may perform this action")


def current_commission_bps(state: LedgerState) -> int:
    return int(state.transaction_fee_bps)


def set_transaction_fee(state: LedgerState, ctx: CallContext, fee_bps: int) -> None:
    assert_one_unit(ctx)
    assert_marketplace_owner(state, ctx)
    if fee_bps < 0 or fee_bps >= BPS_DENOMINATOR:
        raise LedgerValidationError(f"Transaction fee must be below {BPS_DENOMINATOR} basis points")
    previous = state.transaction_fee_bps
    state.transaction_fee_bps = fee_bps
    logger.info("transaction_fee_updated", extra={"previous_bps": previous, "fee_bps": fee_bps})


def get_transaction_fee(state: LedgerState, ctx: CallContext) -> int:
    assert_marketplace_owner(state, ctx)
    return current_commission_bps(state)


class DepositGovernor:
    """Converts storage growth into a required deposit and settles it."""

    def __init__(self, storage_byte_cost: int) -> None:
        self._storage_byte_cost = storage_byte_cost

    def storage_cost(self, storage_bytes: int) -> int:
        return max(storage_bytes, 0) * self._storage_byte_cost

    def settle_storage(self, ctx: CallContext, storage_bytes: int) -> Optional[TransferInstruction]:
        """
        Charge the caller for ``storage_bytes`` of new state.

        Raises InsufficientFundsError if the attached deposit does not cover the
        cost; otherwise returns the refund of the excess, if any. An excess of a
        single unit is kept, as that is the intent deposit.
        """

        required = self.storage_cost(storage_bytes)
        if required > ctx.attached_deposit:
            raise InsufficientFundsError(
                f"Must attach {required} to cover storage of {storage_bytes} bytes"
            )
        refund = ctx.attached_deposit - required
        logger.debug(
            "storage_settled",
            extra={"caller_id": ctx.caller_id, "storage_bytes": storage_bytes, "required": required, "refund": refund},
        )
        if refund > ONE_UNIT:
            return TransferInstruction(receiver_id=ctx.caller_id, amount=refund, kind=TransferKind.REFUND)
        return None

    def settle_purchase(self, ctx: CallContext, storage_bytes: int, price: int) -> Optional[TransferInstruction]:
        """
        Reconcile a purchase.

        The sale price is fully distributed, so the storage growth of the sale
        must be covered by the price itself. Whatever the buyer attached beyond
        the price is refunded.
        """

        required = self.storage_cost(storage_bytes)
        if required > price:
            raise InsufficientFundsError(
                f"Price {price} does not cover storage cost {required} of the sale"
            )
        refund = ctx.attached_deposit - price
        if refund > 0:
            return TransferInstruction(receiver_id=ctx.caller_id, amount=refund, kind=TransferKind.REFUND)
        return None
