"""Marketplace fee endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from marketplace.api.dependencies import get_call_context, get_marketplace_service
from marketplace.ledger import CallContext
from marketplace.schemas.fee import TransactionFeeRequest, TransactionFeeResponse
from marketplace.services.marketplace import MarketplaceService

router = APIRouter()


@router.put("/transaction", response_model=TransactionFeeResponse)
def set_transaction_fee(
    payload: TransactionFeeRequest,
    service: MarketplaceService = Depends(get_marketplace_service),
    ctx: CallContext = Depends(get_call_context),
) -> TransactionFeeResponse:
    fee_bps = service.set_transaction_fee(payload.fee_bps, ctx)
    return TransactionFeeResponse(fee_bps=fee_bps)


@router.get("/transaction", response_model=TransactionFeeResponse)
def get_transaction_fee(
    service: MarketplaceService = Depends(get_marketplace_service),
    ctx: CallContext = Depends(get_call_context),
) -> TransactionFeeResponse:
    return TransactionFeeResponse(fee_bps=service.get_transaction_fee(ctx))
