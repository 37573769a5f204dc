"""NFT ownership-and-payout ledger."""

from .errors import (  # noqa: F401
    InsufficientFundsError,
    InvalidStateError,
    LedgerError,
    LedgerValidationError,
    PayoutOverflowError,
    TokenNotFoundError,
    UnauthorizedError,
)
from .ledger import Ledger  # noqa: F401
from .repository import InMemoryTokenRepository, TokenRepository  # noqa: F401
from .types import CallContext, LedgerOutcome  # noqa: F401
