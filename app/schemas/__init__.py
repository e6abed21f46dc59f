"""Pydantic schemas for request/response validation."""

from app.schemas.profile import (
    ProfileRead,
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    ProfileValidator,
    PydanticProfileValidator,
)

__all__ = [
    "ProfileRead",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "ProfileUpdateResponse",
    "ProfileValidator",
    "PydanticProfileValidator",
]
