from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised for out-of-range spice axes, bad registration payloads or malformed criteria."""


class DuplicateUserError(Exception):
    """Raised when a registration reuses an existing username or email."""
