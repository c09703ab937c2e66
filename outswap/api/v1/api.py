"""
API router aggregation
Combines all route handlers into a single router
Reference: https://fastapi.tiangolo.com/tutorial/bigger-applications/
"""
from fastapi import APIRouter

from outswap.api.v1.routes import health, outfits, ratings, rentals, users


def build_api_router(prefix: str) -> APIRouter:
    """Create the API router with every resource mounted under prefix."""
    api_router = APIRouter(prefix=prefix)
    api_router.include_router(outfits.router)
    api_router.include_router(rentals.router)
    api_router.include_router(ratings.router)
    api_router.include_router(users.router)
    api_router.include_router(health.router)
    return api_router
