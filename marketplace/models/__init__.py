"""SQLAlchemy ORM models for the marketplace ledger."""

from marketplace.models.base import Base  # noqa: F401
from marketplace.models.fund_transfer import FundTransfer  # noqa: F401
from marketplace.models.ledger_state import LedgerStateRecord  # noqa: F401
from marketplace.models.platform_event import PlatformEvent  # noqa: F401
from marketplace.models.token import OwnerToken, Token, TokenMetadataRecord  # noqa: F401
