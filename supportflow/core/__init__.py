"""Shared building blocks: configuration, errors and identifiers."""

from .config import Settings, get_settings, reset_settings_cache
from .errors import (
    AuthenticationRequiredError,
    ConflictError,
    InvalidCredentialsError,
    InvalidRequestError,
    NotFoundError,
    SupportError,
)
from .ids import new_id, utcnow

__all__ = [
    "AuthenticationRequiredError",
    "ConflictError",
    "InvalidCredentialsError",
    "InvalidRequestError",
    "NotFoundError",
    "Settings",
    "SupportError",
    "get_settings",
    "new_id",
    "reset_settings_cache",
    "utcnow",
]
