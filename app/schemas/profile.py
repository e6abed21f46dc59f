"""Profile schemas and the request-body validator."""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from app.services.errors import ProfileValidationError
from app.services.partial_update import PartialUpdate

_HTTP_URL = TypeAdapter(HttpUrl)
_PHONE_PATTERN = r"^[0-9+\-(). ]*$"


class ProfileUpdateRequest(BaseModel):
    """Body of PUT /profile. Every field is optional; "" clears the field."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    first_name: str | None = Field(None, alias="firstName", max_length=100)
    last_name: str | None = Field(None, alias="lastName", max_length=100)
    headline: str | None = Field(None, max_length=255)
    bio: str | None = Field(None, max_length=2000)
    avatar_url: str | None = Field(None, alias="avatarUrl", max_length=2048)
    cover_photo_url: str | None = Field(None, alias="coverPhotoUrl", max_length=2048)
    location: str | None = Field(None, max_length=255)
    phone_number: str | None = Field(
        None, alias="phoneNumber", max_length=32, pattern=_PHONE_PATTERN
    )
    website_url: str | None = Field(None, alias="websiteUrl", max_length=2048)
    linkedin_url: str | None = Field(None, alias="linkedinUrl", max_length=2048)
    github_url: str | None = Field(None, alias="githubUrl", max_length=2048)

    @field_validator("*")
    @classmethod
    def _reject_nul(cls, value: str | None) -> str | None:
        # PostgreSQL text columns cannot store NUL
        if value is not None and "\x00" in value:
            raise ValueError("must not contain NUL characters")
        return value

    @field_validator(
        "avatar_url",
        "cover_photo_url",
        "website_url",
        "linkedin_url",
        "github_url",
    )
    @classmethod
    def _check_url(cls, value: str | None) -> str | None:
        if not value:
            return value
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError:
            raise ValueError("must be a valid http(s) URL") from None
        return value

    def to_partial_update(self) -> dict[str, str | None]:
        """Only the fields the client actually sent, keyed by column name."""
        return self.model_dump(exclude_unset=True)


class ProfileRead(BaseModel):
    """Joined users + user_profiles row returned by GET /profile."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    headline: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    cover_photo_url: str | None = None
    location: str | None = None
    phone_number: str | None = None
    website_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None


class ProfileResponse(BaseModel):
    success: bool = True
    data: ProfileRead


class ProfileUpdateResponse(BaseModel):
    success: bool = True
    message: str = "Profile updated successfully."


def format_validation_errors(exc: ValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``[{"field": ..., "message": ...}]``."""
    details = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        details.append({"field": field, "message": error["msg"]})
    return details


class ProfileValidator(Protocol):
    """Turns a raw request body into a PartialUpdate or raises ProfileValidationError."""

    def validate(self, body: Any) -> PartialUpdate: ...


class PydanticProfileValidator:
    """Default validator backed by :class:`ProfileUpdateRequest`."""

    def validate(self, body: Any) -> PartialUpdate:
        if not isinstance(body, dict):
            raise ProfileValidationError(
                details=[{"field": "body", "message": "Request body must be a JSON object."}]
            )
        try:
            request = ProfileUpdateRequest.model_validate(body)
        except ValidationError as exc:
            raise ProfileValidationError(details=format_validation_errors(exc)) from None
        return request.to_partial_update()
