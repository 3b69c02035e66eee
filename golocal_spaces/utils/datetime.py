"""UTC datetime utilities."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    This function should be used instead of datetime.now() or datetime.utcnow()
    to ensure all timestamps are timezone-aware and stored in UTC.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """True when half-open ranges [start_a, end_a) and [start_b, end_b) intersect."""
    return start_a < end_b and start_b < end_a
