"""Time utilities for consistent timestamp handling."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current datetime in UTC timezone.
    """
    return datetime.now(UTC)


def start_of_day(dt: datetime) -> datetime:
    """Truncate a datetime to midnight of its UTC day.

    Args:
        dt: Datetime to truncate. Naive values are treated as UTC.

    Returns:
        Midnight (UTC) of the same calendar day.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).replace(hour=0, minute=0, second=0, microsecond=0)


def format_iso(dt: datetime) -> str:
    """Format datetime as ISO 8601 string."""
    return dt.isoformat()


def parse_iso(s: str) -> datetime:
    """Parse ISO 8601 string to a timezone-aware datetime.

    A trailing ``Z`` is accepted and naive values are assumed to be UTC.

    Args:
        s: ISO 8601 formatted string.

    Returns:
        Parsed datetime.
    """
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt
