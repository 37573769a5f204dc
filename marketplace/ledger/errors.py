"""Ledger error taxonomy.

Every error aborts the current call; the ledger rolls back whatever the call
had written before the error was raised.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for ledger errors."""

    code = "ledger_error"


class TokenNotFoundError(LedgerError):
    """Raised when a referenced token ID has no record."""

    code = "not_found"


class UnauthorizedError(LedgerError):
    """Raised when the caller is not the token owner or the marketplace owner."""

    code = "unauthorized"


class InvalidStateError(LedgerError):
    """Raised when the token is not in a state that allows the operation."""

    code = "invalid_state"


class InsufficientFundsError(LedgerError):
    """Raised when the attached deposit does not cover what the call requires."""

    code = "insufficient_funds"


class LedgerValidationError(LedgerError):
    """Raised when call arguments violate ledger rules."""

    code = "validation_error"


class PayoutOverflowError(LedgerError):
    """Raised when a distribution would pay out more than the sale price."""

    code = "payout_overflow"
