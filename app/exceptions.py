"""
Application Exceptions

Domain errors raised by services and dependencies. Each error carries the
HTTP status it maps to and a detail message that is safe to show to API
clients; the handlers in app.main turn them into JSON responses.

Taxonomy:
- ValidationError: malformed input (rating out of range, empty comment) -> 400
- NotFoundError: referenced movie/review/user absent -> 404
- ConflictError: duplicate review, username, email or watchlist entry -> 400
- UnauthorizedError: no valid caller identity -> 401
- ForbiddenError: identity present, insufficient rights -> 403
- StoreError: underlying persistence failure -> 500 (detail never exposed)
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "An internal error occurred."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(AppError):
    """Raised when input validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation error"


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class ConflictError(AppError):
    """Raised when a write would duplicate an existing record."""

    # Duplicates are reported as 400, matching the rest of the API surface
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Resource already exists"


class UnauthorizedError(AppError):
    """Raised when authentication is required but not provided."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"


class ForbiddenError(AppError):
    """Raised when the caller lacks permission for an operation."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized to perform this action"


class StoreError(AppError):
    """Raised when the database fails underneath a service operation."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "A database error occurred. Please try again later."
