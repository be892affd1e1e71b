"""Utility functions for the backend."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime. The default clock."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """
    Attach UTC to naive datetimes.

    SQLite drops tzinfo on DateTime(timezone=True) columns, so values read
    back from it are naive even though they were written as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def ensure_utc_optional(value: datetime | None) -> datetime | None:
    return ensure_utc(value) if value is not None else None
