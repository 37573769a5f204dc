"""Transaction fee schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TransactionFeeRequest(BaseModel):
    fee_bps: int = Field(..., description="Marketplace commission in basis points (below 10000)")


class TransactionFeeResponse(BaseModel):
    fee_bps: int
