"""Time utility helpers."""

from __future__ import annotations

from datetime import UTC, datetime

MILLISECONDS_PER_DAY = 1000 * 60 * 60 * 24


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse a PostgREST timestamp (or pass a datetime through) as aware UTC."""
    if isinstance(value, str):
        normalized = value.replace("Z", "+00:00")
        parsed = datetime.fromisoformat(normalized)
    else:
        parsed = value

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def whole_days_between(earlier: str | datetime, later: datetime) -> int:
    """Return elapsed whole days, truncating elapsed milliseconds.

    This is not calendar-day alignment: 6 days and 23 hours counts as 6.
    """
    delta = later - parse_timestamp(earlier)
    elapsed_ms = int(delta.total_seconds() * 1000)
    return elapsed_ms // MILLISECONDS_PER_DAY


def is_different_month(earlier: str | datetime, later: datetime) -> bool:
    """Return True when two instants fall in different UTC calendar months."""
    first = parse_timestamp(earlier)
    second = parse_timestamp(later)
    return (first.year, first.month) != (second.year, second.month)
