"""Clock: the single source of "now" for budget computations.

Services never call datetime.now() directly. They receive a clock so that
daily series and default dates are deterministic under test.
"""

from collections.abc import Callable
from datetime import date, datetime, timezone

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current instant, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def ensure_tz(dt: datetime) -> datetime:
    """SQLite returns naive datetimes; normalize to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def utc_day(dt: datetime) -> date:
    """Calendar day of a timestamp, in UTC."""
    return ensure_tz(dt).astimezone(timezone.utc).date()
