from typing import Any, Dict, Optional
from fastapi import status


class AppException(Exception):
    """Base exception for domain failures raised by services and repositories."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_SERVER_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class NotFoundError(AppException):
    """Entity is absent or outside the caller's organization. Callers cannot tell which."""
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ValidationFailedError(AppException):
    """Malformed input, missing required field or foreign key violation."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class ConflictError(AppException):
    """Uniqueness constraint violation."""
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_message = "Resource already exists"


class UnauthorizedError(AppException):
    """Missing or invalid identity claims."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_message = "Not authenticated"


class AccessDeniedError(AppException):
    """Authenticated, but the role does not allow the action."""
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action."
