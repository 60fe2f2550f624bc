# src/inkwell/db/time.py
"""Time utilities for database models.

All timestamps are stored as UTC. Engines without timezone support
(SQLite) hand values back naive, so readers normalize with :func:`as_utc`.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
