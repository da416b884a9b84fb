"""API routers package."""

from .decoders import router as decoders_router
from .insights import router as insights_router

__all__ = ["decoders_router", "insights_router"]
