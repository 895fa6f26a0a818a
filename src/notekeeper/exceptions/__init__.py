"""Custom exceptions package."""

from .custom_exceptions import (
    BaseAPIException,
    Unauthorized,
    NotFoundOrUnauthorized,
    ValidationError,
    DatabaseUnavailable,
    ActionFailed,
)

__all__ = [
    "BaseAPIException",
    "Unauthorized",
    "NotFoundOrUnauthorized",
    "ValidationError",
    "DatabaseUnavailable",
    "ActionFailed",
]
