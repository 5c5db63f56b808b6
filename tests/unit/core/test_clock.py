"""
Unit tests for time helpers
"""

from datetime import date, datetime, timedelta, timezone

from app.core.clock import FixedClock, ensure_utc, local_date, local_day_bounds


def test_naive_is_taken_as_utc():
    assert ensure_utc(datetime(2026, 1, 1, 12)) == datetime(2026, 1, 1, 12, tzinfo=timezone.utc)


def test_aware_is_converted():
    eastern = timezone(timedelta(hours=-5))
    value = ensure_utc(datetime(2026, 1, 1, 7, tzinfo=eastern))

    assert value == datetime(2026, 1, 1, 12, tzinfo=timezone.utc)
    assert value.tzinfo == timezone.utc


def test_local_date_crosses_midnight():
    # 03:00 UTC is still the previous evening in Chicago
    instant = datetime(2026, 1, 5, 3, 0, tzinfo=timezone.utc)

    assert local_date(instant, "America/Chicago") == date(2026, 1, 4)
    assert local_date(instant, "UTC") == date(2026, 1, 5)


def test_unknown_timezone_falls_back_to_utc():
    instant = datetime(2026, 1, 5, 3, 0, tzinfo=timezone.utc)

    assert local_date(instant, "Not/AZone") == date(2026, 1, 5)


def test_local_day_bounds_winter():
    start, end = local_day_bounds(date(2026, 1, 4), "America/Chicago")

    assert start == datetime(2026, 1, 4, 6, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 1, 5, 6, 0, tzinfo=timezone.utc)


def test_local_day_bounds_summer():
    start, end = local_day_bounds(date(2026, 9, 13), "America/Chicago")

    assert start == datetime(2026, 9, 13, 5, 0, tzinfo=timezone.utc)
    assert end - start == timedelta(hours=24)


class TestFixedClock:

    def test_set_and_advance(self):
        clock = FixedClock(datetime(2026, 1, 1, tzinfo=timezone.utc))

        assert clock() == datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert clock.advance(minutes=90) == datetime(2026, 1, 1, 1, 30, tzinfo=timezone.utc)

        clock.set(datetime(2026, 2, 1))
        assert clock() == datetime(2026, 2, 1, tzinfo=timezone.utc)
