"""
Time helpers.

All lock decisions are made on timezone-aware UTC datetimes. Calendar days
shown to players (today / yesterday) use the configured app timezone.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytz


def ensure_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime (naive values are taken as UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def get_timezone(name: str):
    """pytz timezone by name, UTC when the name is unknown."""
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def local_date(dt: datetime, tz_name: str) -> date:
    """Calendar date of an instant in the given timezone."""
    return ensure_utc(dt).astimezone(get_timezone(tz_name)).date()


def local_day_bounds(day: date, tz_name: str) -> tuple[datetime, datetime]:
    """[start, end) of a local calendar day, as UTC instants."""
    tz = get_timezone(tz_name)
    start = tz.localize(datetime(day.year, day.month, day.day))
    end = tz.localize(datetime(day.year, day.month, day.day) + timedelta(days=1))
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


class SystemClock:
    """Reads the wall clock every time it is called."""

    def __call__(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock pinned to an instant; move it with set() or advance()."""

    def __init__(self, now: Optional[datetime] = None):
        self._now = ensure_utc(now) if now else datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = ensure_utc(now)

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now
