"""Domain exceptions mapped to HTTP status codes by the error middleware."""

from typing import Optional


class StandupSyncError(Exception):
    """Base class for domain errors.

    Args:
        message: Human-readable description returned to the caller.
        details: Optional structured context for the error response.
    """

    status_code: int = 400
    error: str = "bad_request"

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(StandupSyncError):
    status_code = 404
    error = "not_found"


class PermissionDeniedError(StandupSyncError):
    status_code = 403
    error = "forbidden"


class ConflictError(StandupSyncError):
    """Raised when a write collides with existing data (duplicate day, taken email)."""

    status_code = 400
    error = "conflict"


class InvalidRequestError(StandupSyncError, ValueError):
    """Raised for malformed input that passed schema validation."""

    status_code = 400
    error = "validation_error"
