"""Authentication service: JWT verification and caller identity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.config import get_settings

# JWT configuration
ALGORITHM = "HS256"


@dataclass(frozen=True)
class UserIdentity:
    """Verified caller identity for the duration of one request."""

    user_id: int


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.access_token_expire_hours)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def create_user_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Create an access token whose subject is the given user id."""
    return create_access_token(data={"sub": str(user_id)}, expires_delta=expires_delta)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token. Returns payload or None."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def get_identity_from_token(token: str) -> Optional[UserIdentity]:
    """Extract the caller identity from a JWT token.

    Returns None if the token is invalid or expired, or if its ``sub`` claim
    is not a positive integer user id.
    """
    payload = decode_access_token(token)
    if payload is None:
        return None
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        return None
    if user_id <= 0:
        return None
    return UserIdentity(user_id=user_id)
