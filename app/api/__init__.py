"""API routes."""

from app.api.profile import router as profile_router

__all__ = ["profile_router"]
