"""Infrastructure-level exceptions for the Rada learning service."""

from starlette import status


class RadaError(Exception):
    """Base exception for errors raised outside the domain layer."""

    code = "internal_error"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize exception with message and optional status code."""
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ServiceUnavailableError(RadaError):
    """Storage or the learner lock could not be obtained in time. Safe to retry."""

    code = "service_unavailable"

    def __init__(self, message: str, **details: object) -> None:
        """Initialize with a 503 status code."""
        super().__init__(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE, details=details)
