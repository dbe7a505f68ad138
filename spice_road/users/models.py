from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from ..matching.models import SPICE_MAX, SPICE_MIN, CamelModel, SpiceParameters

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class UserPreferences(CamelModel):
    spice_parameters: SpiceParameters = Field(default_factory=SpiceParameters)
    favorite_shops: list[str] = Field(default_factory=list)
    dislikes: list[str] = Field(default_factory=list)

    @field_validator("spice_parameters", mode="before")
    @classmethod
    def _missing_vector_is_neutral(cls, value):
        return {} if value is None else value

    @field_validator("favorite_shops", "dislikes", mode="before")
    @classmethod
    def _missing_list_is_empty(cls, value):
        return [] if value is None else value


class User(CamelModel):
    id: str = Field(..., min_length=1)
    username: str
    email: str
    display_name: str
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    bio: str | None = None
    created_at: datetime
    is_public: bool = True


class PublicUser(CamelModel):
    """A user profile as other users may see it: no username, no email."""

    id: str
    display_name: str
    bio: str | None = None
    preferences: UserPreferences
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> PublicUser:
        return cls(
            id=user.id,
            display_name=user.display_name,
            bio=user.bio,
            preferences=user.preferences,
            created_at=user.created_at,
        )


class SimilarUser(PublicUser):
    similarity: int = Field(..., ge=0, le=100)


# ── Registration payload ────────────────────────────────────────────────


class RegistrationSpiceParameters(CamelModel):
    spiciness: int = Field(..., ge=SPICE_MIN, le=SPICE_MAX, strict=True)
    stimulation: int = Field(..., ge=SPICE_MIN, le=SPICE_MAX, strict=True)
    aroma: int = Field(..., ge=SPICE_MIN, le=SPICE_MAX, strict=True)


class RegistrationPreferences(CamelModel):
    spice_parameters: RegistrationSpiceParameters
    favorite_shops: list[str] = Field(default_factory=list)
    dislikes: list[str] = Field(default_factory=list)


class RegistrationRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=100, pattern=USERNAME_PATTERN)
    email: str = Field(..., min_length=1, max_length=255, pattern=EMAIL_PATTERN)
    display_name: str = Field(..., min_length=1, max_length=255)
    preferences: RegistrationPreferences
    bio: str | None = Field(default=None, max_length=10_000)
