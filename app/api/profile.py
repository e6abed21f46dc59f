"""Profile API routes for the authenticated user."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_profile_validator, read_json_body, require_auth
from app.schemas.profile import (
    ProfileRead,
    ProfileResponse,
    ProfileUpdateResponse,
    ProfileValidator,
)
from app.services.auth import UserIdentity
from app.services.profile_service import get_profile, update_profile

router = APIRouter()


@router.get("", response_model=ProfileResponse)
def api_get_profile(
    identity: UserIdentity = Depends(require_auth),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """Return the caller's core user fields joined with their profile."""
    row = get_profile(db, identity.user_id)
    return ProfileResponse(data=ProfileRead.model_validate(row))


@router.put("", response_model=ProfileUpdateResponse)
def api_update_profile(
    identity: UserIdentity = Depends(require_auth),
    body: Any = Depends(read_json_body),
    validator: ProfileValidator = Depends(get_profile_validator),
    db: Session = Depends(get_db),
) -> ProfileUpdateResponse:
    """Apply a partial update to the caller's profile.

    Omitted fields are left unchanged; "" clears a field. The updated row is
    not returned; clients re-fetch with GET.
    """
    fields = validator.validate(body)
    update_profile(db, identity.user_id, fields)
    return ProfileUpdateResponse()
