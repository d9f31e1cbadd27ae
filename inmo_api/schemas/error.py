"""Error payloads returned by the application-level exception handlers."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorType(str, Enum):
    """Error categories surfaced to API consumers."""

    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    GONE = "gone"
    CONFLICT = "conflict"
    DATABASE_ERROR = "database_error"
    INTERNAL_ERROR = "internal_error"
    TIMEOUT_ERROR = "timeout_error"


class ErrorResponse(BaseModel):
    """Structured error body used for non-envelope routes."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_type": "database_error",
                "message": "Database connection failed",
                "detail": "Unable to reach the listings database",
                "status_code": 503,
                "timestamp": "2026-01-15T10:30:00Z",
                "request_id": "6f1c0c1e-8d0f-4b53-9d61-0b6f3cf0a1de",
                "path": "/api/properties",
                "retry_after": 5,
            }
        }
    )

    error_type: ErrorType = Field(..., description="Category of error")
    message: str = Field(..., description="Human-readable error message")
    detail: str | None = Field(None, description="Additional context")
    status_code: int = Field(..., description="HTTP status code")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    request_id: str | None = Field(None, description="Value of X-Request-ID")
    path: str | None = Field(None, description="Request path that failed")
    retry_after: int | None = Field(
        None, description="Seconds to wait before retrying transient failures"
    )


class ValidationErrorDetail(BaseModel):
    field: str = Field(..., description="Dotted location of the invalid field")
    message: str
    value: Any = None


class ValidationErrorResponse(ErrorResponse):
    error_type: ErrorType = Field(default=ErrorType.VALIDATION_ERROR)
    errors: list[ValidationErrorDetail] = Field(default_factory=list)
