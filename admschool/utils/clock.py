"""Timestamp helpers.

The database columns are timezone-naive, so every timestamp the service
stores or compares against is naive UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current UTC time without tzinfo, comparable with stored columns."""
    return datetime.now(UTC).replace(tzinfo=None)
