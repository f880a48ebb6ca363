# backend/balance_tracker/schemas/errors.py
"""
Pydantic schemas for error responses.

Every error leaves the API in the same envelope, built by the global
exception handlers in main.py:

    {
        "success": false,
        "error": "ValidationError",
        "message": "Invalid year",
        "details": {"field": "year"},
        "traceId": "3f2b...",
        "timestamp": "2025-08-01T10:30:00+00:00"
    }

traceId is the request's correlation ID (also sent as X-Correlation-ID).
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import Field

from balance_tracker.schemas.base import CamelModel


class ErrorDetail(CamelModel):
    """Standard error response format."""

    success: bool = Field(default=False)
    error: str = Field(
        ...,
        description="Error type/code (e.g., 'InvalidCredentialsError')"
    )
    message: str = Field(
        ...,
        description="Human-readable error message"
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error context (optional)"
    )
    trace_id: str | None = Field(
        default=None,
        description="Correlation ID of the failed request"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the error occurred (UTC)"
    )


class ValidationErrorDetail(ErrorDetail):
    """Request validation error format (422 responses)."""

    error: str = Field(default="ValidationError")
    message: str = Field(default="Request validation failed")
    details: list[dict[str, Any]] = Field(  # type: ignore[assignment]
        ...,
        description="List of validation errors"
    )
