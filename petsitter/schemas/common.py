"""
PetSitter Connect Backend — Shared Schemas
===========================================

What:  Base model for camelCase payloads plus the error and health responses.
Why:   Clients need one consistent error structure to parse programmatically.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for every domain payload.

    - alias_generator=to_camel: `owner_id` is sent/received as `ownerId`
    - populate_by_name: snake_case keys are accepted as well
    - from_attributes: responses validate straight from ORM objects
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Listing with ID 42 not found",
            "request_id": "a1b2c3d4",
            "path": "/listings/42",
            "timestamp": "2026-05-01T12:00:00+00:00"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
    path: Optional[str] = Field(default=None, description="Request path that failed")
    timestamp: Optional[str] = Field(default=None, description="When the error occurred (UTC ISO 8601)")


class HealthResponse(BaseModel):
    """GET /health: service status and database connectivity."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
