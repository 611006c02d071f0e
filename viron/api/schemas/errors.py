"""Error body returned by every failing endpoint.

Clients get a machine readable ``error_code`` and a ``message`` they can show,
plus the correlation and request IDs needed to find the matching log lines.
``debug_info`` is only filled in development.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceInfo(BaseModel):
    """Which service and deployment produced the error."""

    name: str = Field(..., description="Name of the service", examples=["Viron"])
    version: str = Field(..., description="Version of the service", examples=["0.1.0"])
    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["VALIDATION_ERROR", "NOT_FOUND", "INTERNAL_ERROR"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Missing userId"],
    )

    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details, e.g. field validation errors",
        examples=[{"validation_errors": {"sss_number": ["String too long"]}}],
    )

    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
    )

    severity: str | None = Field(
        default=None,
        description="Error severity level (LOW, MEDIUM, HIGH, CRITICAL)",
        examples=["LOW", "CRITICAL"],
    )

    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )

    request_id: str | None = Field(
        default=None,
        description="Unique request identifier",
        examples=["req-550e8400-e29b-41d4-a716-446655440000"],
    )

    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated in development environments)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error_code": "VALIDATION_ERROR",
                    "message": "Missing userId",
                    "correlation_id": "550e8400-e29b-41d4-a716-446655440000",
                    "request_id": "req-660e8400-e29b-41d4-a716-446655440000",
                    "timestamp": "2025-06-14T12:00:00+00:00",
                    "severity": "LOW",
                    "service_info": {
                        "name": "Viron",
                        "version": "0.1.0",
                        "environment": "production",
                    },
                }
            ]
        }
    }
