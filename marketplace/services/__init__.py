"""Business logic service layer."""

from marketplace.services.marketplace import MarketplaceService  # noqa: F401
from marketplace.services.token_store import SqlAlchemyTokenRepository  # noqa: F401
from marketplace.services.transfers import RecordingTransferExecutor, TransferExecutor  # noqa: F401
from marketplace.services.ledger_verifier import LedgerVerifier  # noqa: F401
