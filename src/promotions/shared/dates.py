"""Datetime normalization for validity windows."""

from datetime import UTC


def as_utc(value):
    """Treat naive datetimes as UTC so they compare with ``datetime.now(UTC)``."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
