"""
TechNotes Backend — Shared Response Schemas
=============================================

What:  Envelopes shared by every route: confirmation messages, errors, health.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """
    What:  Confirmation returned by every create/update/delete endpoint.
    Example:
        {"message": "New note Groceries created"}
    """
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """
    Standard error response format for all API errors.

    Fields:
        message:    Human-readable description; always present
        error:      Machine-readable error code (e.g. "conflict")
        details:    Additional context (validation errors only)
        request_id: Correlation ID for support and log lookup

    Example:
        {
            "error": "conflict",
            "message": "Duplicate note title",
            "request_id": "a1b2c3d4"
        }
    """
    message: str = Field(description="Human-readable error description")
    error: str = Field(description="Machine-readable error code")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Response of GET /health, consumed by container health checks and load balancers."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Active store backend: sql, memory")
    database: str = Field(description="Database connectivity: connected, disconnected, not_used")
    uptime_seconds: float = Field(description="Seconds since service started")
