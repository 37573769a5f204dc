"""NFT marketplace ownership-and-payout ledger service package."""


def __getattr__(name):
    """Lazy import so the ledger core can be used without loading FastAPI."""
    if name == "create_app":
        from .main import create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
