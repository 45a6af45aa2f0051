"""
Application errors.

Every error the API returns carries a numeric string code grouped by layer:
1xxx system, 2xxx repository/storage, 3xxx service rules, 4xxx request handling.
Services raise these directly; ``app.main`` renders them as
``{"error": ..., "code": ..., "details": ...}``.
"""

from typing import Any, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for errors rendered with the standard error body."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None,
                 headers: Optional[dict[str, str]] = None):
        super().__init__(status_code=self.status_code, detail=message, headers=headers)
        self.code = code
        self.message = message
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ValidationError(AppError):
    """Malformed or out-of-policy input, rejected before touching the store."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    """Entity absent, or owned by someone other than the caller."""
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Duplicate entity or a state transition that does not apply."""
    status_code = status.HTTP_409_CONFLICT


class RateLimitError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


class InfrastructureError(AppError):
    """Store unreachable or unusable. Message is always generic."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


# Messages asserted by clients and tests
USER_ALREADY_EXISTS = "user already exists"
INVALID_CREDENTIALS = "invalid credentials"
WEAK_PASSWORD = "password does not meet requirements"
INVALID_EMAIL = "invalid email format"
TASK_NOT_FOUND = "task not found"
CATEGORY_NOT_FOUND = "category not found"
