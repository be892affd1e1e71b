"""Schemas shared by every router."""

from .error_schemas import ErrorResponse, HealthResponse

__all__ = ["ErrorResponse", "HealthResponse"]
