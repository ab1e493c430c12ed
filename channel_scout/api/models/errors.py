"""Error response models for the API.

All errors share one JSON shape and include a request_id for tracing.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response model.

    Attributes:
        error: Error type identifier (e.g., "VALIDATION_ERROR", "UPSTREAM_ERROR")
        error_code: Machine-readable error code for programmatic handling
        message: Human-readable error message
        details: Additional error context (upstream body, validation errors, ...)
        request_id: Unique request identifier for tracing
        timestamp: ISO 8601 timestamp of when the error occurred
    """

    error: str = Field(
        ...,
        description="Error type identifier",
        examples=["VALIDATION_ERROR"],
    )
    error_code: str = Field(
        ...,
        description="Machine-readable error code",
        examples=["INVALID_PARAMETER"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["minSubscribers must be less than or equal to maxSubscribers"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details and context",
    )
    request_id: str = Field(
        ...,
        description="Unique request identifier for tracing",
        examples=["9b2f0c1e-7d4a-4c55-9f0e-2a6f3b1d8c47"],
    )
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="ISO 8601 timestamp of error occurrence",
    )


class ValidationErrorResponse(ErrorResponse):
    """Validation error response for malformed or out-of-range parameters."""

    error: str = Field(default="VALIDATION_ERROR", frozen=True)


class UpstreamErrorResponse(ErrorResponse):
    """YouTube Data API failure; details carry the upstream status and body."""

    error: str = Field(default="UPSTREAM_ERROR", frozen=True)
    error_code: str = Field(default="EXTERNAL_SERVICE_ERROR", frozen=True)


class InternalServerErrorResponse(ErrorResponse):
    """Internal server error response for unexpected failures."""

    error: str = Field(default="INTERNAL_SERVER_ERROR", frozen=True)
    error_code: str = Field(default="INTERNAL_ERROR")
    message: str = Field(
        default="An unexpected error occurred. Please try again later.",
        description="Generic error message to avoid leaking internal details",
    )


class ErrorCodes:
    """Standardized error codes for the API."""

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PARAMETER = "INVALID_PARAMETER"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    STORAGE_READ_ERROR = "STORAGE_READ_ERROR"
    STORAGE_WRITE_ERROR = "STORAGE_WRITE_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
