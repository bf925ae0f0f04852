"""Utility functions and helpers."""

from pagecraft.utils.responses import success, created, error, validation_error, not_found
from pagecraft.utils.auth import get_auth_context, AuthContext
from pagecraft.utils.exceptions import (
    PagecraftError,
    NotFoundError,
    ValidationError,
    ForbiddenError,
    ConflictError,
    PersistenceError,
)

__all__ = [
    # Response helpers
    "success",
    "created",
    "error",
    "validation_error",
    "not_found",
    # Auth
    "get_auth_context",
    "AuthContext",
    # Exceptions
    "PagecraftError",
    "NotFoundError",
    "ValidationError",
    "ForbiddenError",
    "ConflictError",
    "PersistenceError",
]
