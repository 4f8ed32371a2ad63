"""
Service-layer error taxonomy.

Services raise these; ``main.py`` maps them onto HTTP responses. A denied
view and a missing record both raise ``NotFoundError`` so callers cannot
probe for other users' record ids.
"""

from typing import Any, Dict, Optional

from fastapi import status


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None, payload: Optional[Dict[str, Any]] = None):
        self.detail = detail or self.default_detail
        self.payload = payload or {}
        super().__init__(self.detail)


class ValidationError(ServiceError):
    """Malformed input, including unknown action names."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_detail = "Invalid input"


class NotFoundError(ServiceError):
    """Record absent or not visible to the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_detail = "Not found"


class ConflictError(ServiceError):
    """Valid request that does not apply to the record's current state."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_detail = "Conflict"


class ForbiddenError(ServiceError):
    """Authenticated actor lacks the role or ownership for a visible record."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_detail = "Insufficient permissions"
