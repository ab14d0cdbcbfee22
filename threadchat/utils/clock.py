"""Timestamp helpers."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form DuckDB TIMESTAMP stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
