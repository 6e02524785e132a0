"""Timestamp helpers.

Every timestamp stored by the service is a naive ``datetime`` in UTC, which
is what DuckDB's ``TIMESTAMP`` column round-trips. Pagination cursors
start with the ISO-8601 rendering of a message's ``created_at``.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def format_cursor(value: datetime) -> str:
    return to_naive_utc(value).isoformat()


def parse_cursor(cursor: str) -> datetime:
    """
    Parse a pagination cursor back into a timestamp.

    Raises:
        ValueError: if the cursor is not an ISO-8601 timestamp
    """
    # fromisoformat only accepts a trailing "Z" on 3.11+
    if cursor.endswith("Z"):
        cursor = cursor[:-1] + "+00:00"
    return to_naive_utc(datetime.fromisoformat(cursor))
