"""API routes for deckport."""

from fastapi import APIRouter

from deckport.api.routes.export import router as export_router
from deckport.api.routes.health import router as health_router

# Main API router
api_router = APIRouter()

api_router.include_router(health_router, tags=["Health"])
api_router.include_router(export_router, prefix="/export", tags=["Export"])

__all__ = ["api_router"]
