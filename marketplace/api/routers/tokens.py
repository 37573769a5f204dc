"""Token HTTP endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, status

from marketplace.api.dependencies import get_call_context, get_marketplace_service
from marketplace.ledger import CallContext
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
    TokenView,
)
from marketplace.services.marketplace import MarketplaceService

router = APIRouter()


@router.post(
    "/mint",
    response_model=MintResponse,
    status_code=status.HTTP_201_CREATED,
)
def mint_batch(
    payload: MintBatchRequest,
    service: MarketplaceService = Depends(get_marketplace_service),
    ctx: CallContext = Depends(get_call_context),
) -> MintResponse:
    result = service.mint_batch(payload, ctx)
    return MintResponse(last_id=result.last_id, token_ids=result.ids, owner_id=result.owner_id)


@router.post(
    "/mint-unique",
    response_model=MintResponse,
    status_code=status.HTTP_201_CREATED,
)
def mint_unique(
    payload: MintUniqueRequest,
    service: MarketplaceService = Depends(get_marketplace_service),
    ctx: CallContext = Depends(get_call_context),
) -> MintResponse:
    result = service.mint_unique(payload, ctx)
    return MintResponse(
        last_id=result.last_id,
        token_ids=result.ids,
        owner_id=result.owner_id,
        metadata=result.metadata,
    )


@router.get("/supply", response_model=SupplyResponse)
def get_supply(service: MarketplaceService = Depends(get_marketplace_service)) -> SupplyResponse:
    total_supply, tokens_minted = service.supply()
    return SupplyResponse(total_supply=total_supply, tokens_minted=tokens_minted)


@router.get("/owners/{owner_id}", response_model=OwnerTokensResponse)
def list_owner_tokens(
    owner_id: str,
    service: MarketplaceService = Depends(get_marketplace_service),
) -> OwnerTokensResponse:
    return OwnerTokensResponse(owner_id=owner_id, token_ids=service.tokens_for_owner(owner_id))


@router.get("/{token_id}", response_model=TokenView)
def get_token(
    token_id: int,
    service: MarketplaceService = Depends(get_marketplace_service),
) -> TokenView:
    record, metadata = service.get_token(token_id)
    return TokenView(
        token_id=record.token_id,
        owner_id=record.owner_id,
        price=record.price,
        royalty=record.royalty,
        splitpayments=record.splitpayments,
        approved_account_ids=record.approved_account_ids,
        next_approval_id=record.next_approval_id,
        metadata=metadata,
    )


@router.post("/{token_id}/buy", response_model=BuyResponse)
def buy_token(
    token_id: int,
    payload: Optional[BuyRequest] = Body(default=None),
    service: MarketplaceService = Depends(get_marketplace_service),
    ctx: CallContext = Depends(get_call_context),
) -> BuyResponse:
    payload = payload or BuyRequest()
    result = service.buy(token_id, ctx, memo=payload.memo, art_id=payload.art_id)
    return BuyResponse(token_id=result.token_id, new_owner=result.new_owner, art_id=result.art_id)


@router.post("/{token_id}/burn", response_model=BurnResponse)
def burn_token(
    token_id: int,
    payload: Optional[BurnRequest] = Body(default=None),
    service: MarketplaceService = Depends(get_marketplace_service),
    ctx: CallContext = Depends(get_call_context),
) -> BurnResponse:
    payload = payload or BurnRequest()
    result = service.burn(token_id, ctx, art_id=payload.art_id)
    return BurnResponse(token_id=result.token_id, art_id=result.art_id)


@router.put("/{token_id}/price", response_model=PriceResponse)
def update_price(
    token_id: int,
    payload: PriceUpdateRequest,
    service: MarketplaceService = Depends(get_marketplace_service),
    ctx: CallContext = Depends(get_call_context),
) -> PriceResponse:
    result = service.update_price(token_id, payload.price, ctx, art_id=payload.art_id)
    return PriceResponse(token_id=result.token_id, new_price=result.new_price, art_id=result.art_id)
