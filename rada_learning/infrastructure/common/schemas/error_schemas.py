"""Pydantic schemas for error and health responses."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every non-2xx response raised from a domain or service error."""

    error: str = Field(..., description="Stable machine-readable error code")
    message: str = Field(..., description="Human-readable description")
    details: dict[str, Any] = Field(default_factory=dict, description="Error context")


class HealthResponse(BaseModel):
    """Schema for the health check response."""

    status: str = Field(..., description="Service status")
    database: str = Field(..., description="Database connectivity")
