"""Profile service: read the joined profile and apply partial updates."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.session import transaction_scope
from app.services.errors import EmptyUpdateError, PersistenceError, ProfileNotFoundError
from app.services.partial_update import (
    PartialUpdate,
    build_core_update,
    build_profile_upsert,
)

logger = logging.getLogger(__name__)

GET_PROFILE_ERROR = "An unexpected error occurred while fetching the profile."
UPDATE_PROFILE_ERROR = "An unexpected error occurred while updating the profile."

PROFILE_QUERY = text(
    """
    SELECT
        u.id AS user_id,
        u.email,
        u.first_name,
        u.last_name,
        up.headline,
        up.bio,
        up.avatar_url,
        up.cover_photo_url,
        up.location,
        up.phone_number,
        up.website_url,
        up.linkedin_url,
        up.github_url
    FROM users u
    LEFT JOIN user_profiles up ON u.id = up.user_id
    WHERE u.id = :user_id
    """
)


def get_profile(db: Session, user_id: int) -> dict[str, Any]:
    """Return the user's core fields joined with their profile.

    Profile columns are None when the user has no user_profiles row yet.
    Raises ProfileNotFoundError when the user itself does not exist.
    """
    try:
        row = db.execute(PROFILE_QUERY, {"user_id": user_id}).mappings().first()
    except SQLAlchemyError as exc:
        logger.exception("Get profile failed: user_id=%s", user_id)
        raise PersistenceError(GET_PROFILE_ERROR) from exc

    if row is None:
        logger.info("Profile not found: user_id=%s", user_id)
        raise ProfileNotFoundError()
    return dict(row)


def update_profile(db: Session, user_id: int, fields: PartialUpdate) -> None:
    """Apply a partial update to users and user_profiles in one transaction.

    Only supplied fields are written; "" clears a column. Raises
    EmptyUpdateError before touching the database when nothing was supplied.
    Any database error rolls the transaction back and surfaces as
    PersistenceError.
    """
    core_stmt = build_core_update(fields, user_id)
    profile_stmt = build_profile_upsert(fields, user_id)
    if core_stmt is None and profile_stmt is None:
        logger.info("Empty profile update rejected: user_id=%s", user_id)
        raise EmptyUpdateError()

    try:
        with transaction_scope(db):
            if core_stmt is not None:
                db.execute(text(core_stmt.sql), core_stmt.params)
            if profile_stmt is not None:
                db.execute(text(profile_stmt.sql), profile_stmt.params)
    except SQLAlchemyError as exc:
        logger.exception("Update profile failed: user_id=%s", user_id)
        raise PersistenceError(UPDATE_PROFILE_ERROR) from exc

    logger.info(
        "Profile updated: user_id=%s fields=%s",
        user_id,
        ",".join(sorted(fields)),
    )
