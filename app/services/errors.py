"""Profile error taxonomy.

Each error carries the HTTP status and the client-facing message it maps to.
The exception handler registered in ``app.main`` renders them into the
``{"success": false, "error": ..., "details": ...}`` envelope.
"""

from __future__ import annotations

from typing import Any


class ProfileError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    message: str = "An unexpected error occurred."

    def __init__(
        self,
        message: str | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        if message is not None:
            self.message = message
        self.details = details
        super().__init__(self.message)


class AuthenticationError(ProfileError):
    """No caller identity, or the credential failed verification."""

    status_code = 401
    message = "Authentication required."


class ProfileValidationError(ProfileError):
    """Request body rejected by the profile schema."""

    status_code = 400
    message = "Invalid input."


class EmptyUpdateError(ProfileError):
    """Well-formed update that names no recognized field."""

    status_code = 400
    message = "No update fields provided."


class ProfileNotFoundError(ProfileError):
    status_code = 404
    message = "User profile not found."


class PersistenceError(ProfileError):
    """Datastore failure. The message stays generic; detail is only logged."""

    status_code = 500
