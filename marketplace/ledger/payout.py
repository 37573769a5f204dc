"""Payout engine: splits a sale price across beneficiaries, treasury and seller."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from marketplace.ledger.accounts import BPS_DENOMINATOR
from marketplace.ledger.errors import PayoutOverflowError
from marketplace.ledger.types import TokenRecord, TransferInstruction, TransferKind


def bps_to_amount(price: int, bps: int) -> int:
    return price * bps // BPS_DENOMINATOR


@dataclass(frozen=True)
class PayoutPlan:
    """Transfers that settle one sale, commission first and seller last."""

    price: int
    distributed_bps: int
    commission: int
    seller_amount: int
    instructions: List[TransferInstruction] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(instruction.amount for instruction in self.instructions)


def compute_payout(record: TokenRecord, *, price: int, fee_bps: int, treasury_id: str) -> PayoutPlan:
    """
    Compute the distribution of ``price`` for a sale of ``record``.

    Royalty and split-payment shares owed to anyone but the seller are converted
    with floor division. The commission goes to the treasury regardless of the
    shares. The seller gets everything left, so the plan always sums to
    ``price``: the commission is netted from the seller once, and the rounding
    remainder of the other shares stays with the seller.

    Raises PayoutOverflowError if the shares exceed 100% or if the seller's
    part cannot cover the commission.
    """

    seller_id = record.owner_id
    instructions: List[TransferInstruction] = []
    distributed_bps = 0

    for kind, shares in (
        (TransferKind.ROYALTY, record.royalty),
        (TransferKind.SPLIT_PAYMENT, record.splitpayments),
    ):
        for account_id, bps in sorted(shares.items()):
            if account_id == seller_id:
                continue
            instructions.append(
                TransferInstruction(receiver_id=account_id, amount=bps_to_amount(price, bps), kind=kind)
            )
            distributed_bps += bps

    if distributed_bps > BPS_DENOMINATOR:
        raise PayoutOverflowError(f"Payout of {distributed_bps} basis points exceeds {BPS_DENOMINATOR}")

    commission = bps_to_amount(price, fee_bps)
    seller_amount = price - sum(instruction.amount for instruction in instructions) - commission
    if seller_amount < 0:
        raise PayoutOverflowError("Seller share does not cover the marketplace commission")

    instructions.insert(
        0, TransferInstruction(receiver_id=treasury_id, amount=commission, kind=TransferKind.COMMISSION)
    )
    instructions.append(TransferInstruction(receiver_id=seller_id, amount=seller_amount, kind=TransferKind.SELLER))

    return PayoutPlan(
        price=price,
        distributed_bps=distributed_bps,
        commission=commission,
        seller_amount=seller_amount,
        instructions=instructions,
    )
