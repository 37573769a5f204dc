"""Token API schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenMetadata(BaseModel):
    """Descriptive token metadata (NEP-177 fields); content is not validated."""

    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    description: Optional[str] = None
    media: Optional[str] = None
    media_hash: Optional[str] = None
    copies: Optional[int] = None
    issued_at: Optional[str] = None
    expires_at: Optional[str] = None
    starts_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Optional[str] = None
    reference: Optional[str] = None
    reference_hash: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class MintBatchRequest(BaseModel):
    """Mint ``count`` tokens sharing one metadata record and price."""

    metadata: TokenMetadata
    receiver_id: str = Field(..., description="Account receiving the minted tokens")
    count: int = Field(..., description="Number of tokens to mint (1-125)")
    price: Optional[int] = Field(default=None, description="Listing price in the smallest unit")
    royalty: Optional[Dict[str, int]] = Field(default=None, description="Perpetual royalties in basis points")
    split_payment: Optional[Dict[str, int]] = Field(
        default=None,
        description="One-time split of the next sale in basis points",
    )


class MintUniqueRequest(BaseModel):
    """Mint ``count`` tokens with per-token metadata and prices."""

    metadata: List[TokenMetadata]
    receiver_id: str
    count: int
    prices: List[Optional[int]] = Field(default_factory=list)
    royalty: Optional[Dict[str, int]] = None
    split_payment: Optional[Dict[str, int]] = None


class MintResponse(BaseModel):
    last_id: int
    token_ids: List[int]
    owner_id: str
    metadata: Optional[List[Dict[str, Any]]] = None


class BuyRequest(BaseModel):
    memo: Optional[str] = Field(default=None, max_length=256)
    art_id: Optional[str] = Field(default=None, max_length=128)


class BuyResponse(BaseModel):
    token_id: int
    new_owner: str
    art_id: Optional[str] = None


class BurnRequest(BaseModel):
    art_id: Optional[str] = Field(default=None, max_length=128)


class BurnResponse(BaseModel):
    token_id: int
    art_id: Optional[str] = None
    status: str = "burned"


class PriceUpdateRequest(BaseModel):
    price: int
    art_id: Optional[str] = Field(default=None, max_length=128)


class PriceResponse(BaseModel):
    token_id: int
    new_price: int
    art_id: Optional[str] = None


class TokenView(BaseModel):
    """Token record together with its metadata."""

    token_id: int
    owner_id: str
    price: Optional[int] = None
    royalty: Dict[str, int] = Field(default_factory=dict)
    splitpayments: Dict[str, int] = Field(default_factory=dict)
    approved_account_ids: Dict[str, int] = Field(default_factory=dict)
    next_approval_id: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)


class OwnerTokensResponse(BaseModel):
    owner_id: str
    token_ids: List[int]


class SupplyResponse(BaseModel):
    total_supply: int
    tokens_minted: int
