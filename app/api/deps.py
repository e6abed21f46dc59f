"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

import json
from typing import Any

from fastapi import Cookie, Depends, Header, Request

from app.db.session import get_db  # re-export
from app.schemas.profile import ProfileValidator, PydanticProfileValidator
from app.services.auth import UserIdentity, get_identity_from_token
from app.services.errors import AuthenticationError, ProfileValidationError

__all__ = [
    "get_db",
    "get_current_identity",
    "get_profile_validator",
    "read_json_body",
    "require_auth",
]

# Cookie name for browser sessions
AUTH_COOKIE = "access_token"

_default_validator = PydanticProfileValidator()


def get_current_identity(
    authorization: str | None = Header(None),
    cookie_token: str | None = Cookie(None, alias=AUTH_COOKIE),
) -> UserIdentity | None:
    """Return the verified caller identity or None.

    Checks (in order):
    1. Authorization: Bearer <token> header
    2. AUTH_COOKIE cookie
    """
    token: str | None = None

    # Check Authorization header (scheme is case-insensitive)
    if authorization and authorization[:7].lower() == "bearer ":
        token = authorization[7:].strip()

    # Fall back to cookie
    if not token and cookie_token:
        token = cookie_token

    if not token:
        return None

    return get_identity_from_token(token)


def require_auth(
    identity: UserIdentity | None = Depends(get_current_identity),
) -> UserIdentity:
    """Dependency that requires authentication; raises AuthenticationError (401)."""
    if identity is None:
        raise AuthenticationError()
    return identity


def get_profile_validator() -> ProfileValidator:
    """Validator used by PUT /profile. Override in tests to swap in a fake."""
    return _default_validator


async def read_json_body(request: Request) -> Any:
    """Parse the request body as JSON; malformed bodies are a validation error."""
    raw = await request.body()
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise ProfileValidationError(
            details=[{"field": "body", "message": "Request body must be valid JSON."}]
        ) from None
