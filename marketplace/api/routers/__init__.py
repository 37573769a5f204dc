"""Router registrations."""

from fastapi import APIRouter

from marketplace.api.routers import fees, health, tokens


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router, tags=["health"])
    router.include_router(tokens.router, prefix="/api/v1/tokens", tags=["tokens"])
    router.include_router(fees.router, prefix="/api/v1/fees", tags=["fees"])
    return router
