"""Minting allocator: sequential token IDs and batch population of the registry."""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence

from marketplace.ledger.accounts import ensure_account_id, validate_beneficiaries
from marketplace.ledger.errors import LedgerValidationError
from marketplace.ledger.registry import TokenRegistry
from marketplace.ledger.types import EventKind, LedgerState, Metadata, MintResult, NftEvent, TokenId, TokenRecord

# Per-call resource limit of the host.
MAX_MINT_BATCH = 125

# Amounts are u128 in the smallest currency unit.
MAX_AMOUNT = 2**128 - 1

logger = logging.getLogger("marketplace.ledger.minting")


def validate_batch_size(count: int) -> None:
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise LedgerValidationError("Number of tokens to mint must be greater than 0")
    if count > MAX_MINT_BATCH:
        raise LedgerValidationError(f"Cannot mint more than {MAX_MINT_BATCH} tokens in one call")


def validate_price(price: Optional[int]) -> Optional[int]:
    if price is None:
        return None
    if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
        raise LedgerValidationError(f"Price must be a positive integer, got {price!r}")
    if price > MAX_AMOUNT:
        raise LedgerValidationError(f"Price must not exceed {MAX_AMOUNT}")
    return price


def allocate_ids(state: LedgerState, count: int) -> List[TokenId]:
    """Reserve ``count`` consecutive IDs and advance the counter past them."""

    first_id = state.tokens_minted
    state.tokens_minted += count
    return list(range(first_id, first_id + count))


def mint_tokens(
    registry: TokenRegistry,
    state: LedgerState,
    *,
    receiver_id: str,
    count: int,
    metadata: Sequence[Metadata],
    prices: Sequence[Optional[int]],
    royalty: Optional[Mapping[str, int]] = None,
    splitpayments: Optional[Mapping[str, int]] = None,
) -> tuple[MintResult, List[NftEvent]]:
    """
    Mint ``count`` tokens to ``receiver_id``.

    ``metadata`` and ``prices`` hold one entry per token. Everything is
    validated before the first record is written, so a rejected batch leaves
    the registry and the counter untouched.
    """

    validate_batch_size(count)
    ensure_account_id(receiver_id)
    if len(metadata) != count:
        raise LedgerValidationError(f"Expected {count} metadata entries, got {len(metadata)}")
    if len(prices) != count:
        raise LedgerValidationError(f"Expected {count} prices, got {len(prices)}")
    checked_prices = [validate_price(price) for price in prices]
    royalty_map, split_map = validate_beneficiaries(royalty, splitpayments)

    ids = allocate_ids(state, count)
    events: List[NftEvent] = []
    for index, token_id in enumerate(ids):
        record = TokenRecord(
            token_id=token_id,
            owner_id=receiver_id,
            price=checked_prices[index],
            royalty=dict(royalty_map),
            splitpayments=dict(split_map),
        )
        registry.insert(record, dict(metadata[index]))
        events.append(NftEvent(kind=EventKind.MINT, token_ids=[token_id], owner_id=receiver_id))

    logger.info(
        "tokens_minted",
        extra={"receiver_id": receiver_id, "count": count, "first_id": ids[0], "last_id": ids[-1]},
    )
    return MintResult(last_id=ids[-1], ids=ids, owner_id=receiver_id), events
