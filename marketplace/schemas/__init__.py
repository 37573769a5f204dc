"""Pydantic schemas for API payloads."""

from marketplace.schemas.fee import TransactionFeeRequest, TransactionFeeResponse
from marketplace.schemas.token import (
    BurnRequest,
    BurnResponse,
    BuyRequest,
    BuyResponse,
    MintBatchRequest,
    MintResponse,
    MintUniqueRequest,
    OwnerTokensResponse,
    PriceResponse,
    PriceUpdateRequest,
    SupplyResponse,
    TokenMetadata,
    TokenView,
)

__all__ = [
    "BurnRequest",
    "BurnResponse",
    "BuyRequest",
    "BuyResponse",
    "MintBatchRequest",
    "MintResponse",
    "MintUniqueRequest",
    "OwnerTokensResponse",
    "PriceResponse",
    "PriceUpdateRequest",
    "SupplyResponse",
    "TokenMetadata",
    "TokenView",
    "TransactionFeeRequest",
    "TransactionFeeResponse",
]
