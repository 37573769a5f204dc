"""Account identifier and basis-point validation."""

from __future__ import annotations

import re
from typing import Dict, Mapping, Optional

from marketplace.ledger.errors import LedgerValidationError

MIN_ACCOUNT_ID_LEN = 2
MAX_ACCOUNT_ID_LEN = 64

# Lowercase alphanumeric parts joined by "-" or "_", dot separated.
_ACCOUNT_ID_RE = re.compile(r"^(([a-z\d]+[\-_])*[a-z\d]+\.)*([a-z\d]+[\-_])*[a-z\d]+$")

BPS_DENOMINATOR = 10_000
MAX_PERPETUAL_BPS = 5_000
MAX_BENEFICIARIES = 10


def is_valid_account_id(account_id: object) -> bool:
    if not isinstance(account_id, str):
        return False
    if not MIN_ACCOUNT_ID_LEN <= len(account_id) <= MAX_ACCOUNT_ID_LEN:
        return False
    return _ACCOUNT_ID_RE.match(account_id) is not None


def ensure_account_id(account_id: object) -> str:
    if not is_valid_account_id(account_id):
        raise LedgerValidationError(f"Account ID {account_id!r} is not valid")
    return account_id  # type: ignore[return-value]


def validate_beneficiaries(
    royalty: Optional[Mapping[str, int]],
    splitpayments: Optional[Mapping[str, int]],
) -> tuple[Dict[str, int], Dict[str, int]]:
    """Validate the royalty and split-payment maps supplied at mint time.

    Returns normalized copies of both maps. Raises LedgerValidationError when an
    identifier is malformed, a share is outside 0..10000, more than
    MAX_BENEFICIARIES distinct accounts are named, or the shares add up to more than
    MAX_PERPETUAL_BPS.
    """

    total_bps = 0
    accounts: set[str] = set()
    normalized: list[Dict[str, int]] = []

    for shares in (royalty, splitpayments):
        checked: Dict[str, int] = {}
        for account_id, bps in (shares or {}).items():
            ensure_account_id(account_id)
            if isinstance(bps, bool) or not isinstance(bps, int) or not 0 <= bps <= BPS_DENOMINATOR:
                raise LedgerValidationError(
                    f"Share for {account_id} must be between 0 and {BPS_DENOMINATOR} basis points"
                )
            checked[account_id] = bps
            total_bps += bps
            accounts.add(account_id)
        normalized.append(checked)

    if len(accounts) > MAX_BENEFICIARIES:
        raise LedgerValidationError(
            f"At most {MAX_BENEFICIARIES} royalty and split-payment accounts are allowed"
        )
    if total_bps > MAX_PERPETUAL_BPS:
        raise LedgerValidationError(
            f"Royalties and split payments may claim at most {MAX_PERPETUAL_BPS} basis points, got {total_bps}"
        )

    return normalized[0], normalized[1]
