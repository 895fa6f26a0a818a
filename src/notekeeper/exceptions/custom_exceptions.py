"""Custom exceptions for the application."""

from fastapi import HTTPException, status
from typing import Optional, Dict, Any


class BaseAPIException(HTTPException):
    """Base class for every action-level error."""

    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.error_code = error_code
        self.message = message
        detail = {
            "error": {
                "code": error_code,
                "message": message
            }
        }
        if details:
            detail["error"]["details"] = details

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def __str__(self) -> str:
        return self.message


# ============ Identity ============

class Unauthorized(BaseAPIException):
    """No identity could be resolved from the request."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="UNAUTHORIZED",
            message=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


# ============ Resources ============

class NotFoundOrUnauthorized(BaseAPIException):
    """
    The record does not exist, or exists but belongs to someone else.

    The two cases are reported identically so that callers cannot probe
    for the existence of other users' records.
    """

    def __init__(self, resource_type: str, resource_id: str, message: Optional[str] = None):
        if message is None:
            message = f"{resource_type} not found or unauthorized"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            message=message,
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


# ============ Validation ============

class ValidationError(BaseAPIException):
    """A required field is missing or blank."""

    def __init__(self, field: str, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            message=message,
            details={"field": field}
        )


# ============ Persistence ============

class DatabaseUnavailable(BaseAPIException):
    """The database could not be reached."""

    def __init__(self, message: str = "Database connection failed"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="CONNECTION_FAILED",
            message=message
        )


class ActionFailed(BaseAPIException):
    """Any other failure while running an action."""

    def __init__(self, message: str = "The operation failed. Please try again later."):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="ACTION_FAILED",
            message=message
        )
