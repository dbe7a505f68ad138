from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import ValidationError

from ..errors import DuplicateUserError, InvalidInputError
from ..matching.models import SpiceParameters
from .models import RegistrationRequest, User, UserPreferences


def _describe(exc: ValidationError) -> str:
    """Turn the first pydantic error into a one-line message."""
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def validate_registration(payload: Any) -> RegistrationRequest:
    """Validate a raw registration body. Raises ``InvalidInputError``."""
    if not isinstance(payload, dict):
        raise InvalidInputError("Registration body must be a JSON object")
    try:
        return RegistrationRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(_describe(exc)) from exc


def find_conflict(request: RegistrationRequest, users: list[User]) -> User | None:
    """Return an existing user sharing the username or email (case-insensitive)."""
    username = request.username.lower()
    email = request.email.lower()
    for user in users:
        if user.username.lower() == username or user.email.lower() == email:
            return user
    return None


def register_user(
    request: RegistrationRequest,
    existing_users: list[User],
    *,
    now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    new_id: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> User:
    """Build a new ``User`` from a validated request.

    Raises ``DuplicateUserError`` when the username or email is taken. The
    caller is responsible for persisting the returned user.
    """
    if find_conflict(request, existing_users) is not None:
        raise DuplicateUserError("Username or email already exists")

    prefs = request.preferences
    return User(
        id=new_id(),
        username=request.username,
        email=request.email,
        display_name=request.display_name,
        preferences=UserPreferences(
            spice_parameters=SpiceParameters(**prefs.spice_parameters.model_dump()),
            favorite_shops=list(prefs.favorite_shops),
            dislikes=list(prefs.dislikes),
        ),
        bio=request.bio or "",
        created_at=now(),
        is_public=True,
    )
