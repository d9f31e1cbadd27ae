"""Domain exceptions raised by services and translated into HTTP responses.

Services never build HTTP responses themselves.  They raise one of the classes
below and the routers (or the application-level exception handler) map the
``status_code`` and message onto the ``{"success": false, "error": ...}``
envelope.
"""

from __future__ import annotations

from inmo_api.schemas.error import ErrorType

GENERIC_INTERNAL_MESSAGE = "Error interno del servidor"


class DomainError(Exception):
    """Base class for expected, user-facing failures."""

    status_code: int = 500
    error_type: ErrorType = ErrorType.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        return self.message


class ValidationError(DomainError):
    """Missing or malformed input."""

    status_code = 400
    error_type = ErrorType.VALIDATION_ERROR


class NotFoundError(DomainError):
    status_code = 404
    error_type = ErrorType.NOT_FOUND


class GoneError(NotFoundError):
    """The entity existed but is no longer available (e.g. an expired proposal)."""

    status_code = 410
    error_type = ErrorType.GONE


class ConflictError(DomainError):
    status_code = 409
    error_type = ErrorType.CONFLICT


class InternalError(DomainError):
    """Unexpected storage failure.  The public message never leaks the cause."""

    status_code = 500
    error_type = ErrorType.INTERNAL_ERROR

    def __init__(self, message: str = GENERIC_INTERNAL_MESSAGE) -> None:
        super().__init__(message)


__all__ = [
    "ConflictError",
    "DomainError",
    "GENERIC_INTERNAL_MESSAGE",
    "GoneError",
    "InternalError",
    "NotFoundError",
    "ValidationError",
]
