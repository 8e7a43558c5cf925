# backend/tests/utils/test_date_utils.py
"""Tests for epoch-ms and calendar-day helpers."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from app.utils.date_utils import (
    datetime_to_ms,
    day_end_ms,
    day_range_to_bounds,
    day_start_ms,
    ms_to_datetime,
    start_of_day_ms,
)

AMSTERDAM = ZoneInfo("Europe/Amsterdam")
DAY_MS = 24 * 60 * 60 * 1000


class TestConversions:
    def test_epoch(self):
        assert datetime_to_ms(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 0

    def test_naive_datetime_is_utc(self):
        assert datetime_to_ms(datetime(2024, 1, 1)) == 1704067200000

    def test_round_trip(self):
        value = datetime(2024, 3, 1, 12, 30, 15, 123000, tzinfo=timezone.utc)

        assert ms_to_datetime(datetime_to_ms(value)) == value


class TestDayBounds:
    """Tests for whole-day bounds."""

    def test_utc_day(self):
        assert day_start_ms(date(2024, 1, 1)) == 1704067200000
        assert day_end_ms(date(2024, 1, 1)) == 1704067200000 + DAY_MS - 1

    def test_end_covers_last_millisecond(self):
        """Something at 23:59:59.999 is inside the day."""
        last = datetime_to_ms(datetime(2024, 1, 1, 23, 59, 59, 999000, tzinfo=timezone.utc))

        assert day_end_ms(date(2024, 1, 1)) == last

    def test_timezone_shifts_midnight(self):
        """Amsterdam midnight on 1 Jan is 23:00 UTC the day before."""
        assert day_start_ms(date(2024, 1, 1), AMSTERDAM) == 1704067200000 - 3_600_000

    def test_dst_day_is_23_hours(self):
        """The spring-forward day is one hour short."""
        d = date(2024, 3, 31)
        length = day_end_ms(d, AMSTERDAM) + 1 - day_start_ms(d, AMSTERDAM)

        assert length == DAY_MS - 3_600_000

    def test_range_open_ends(self):
        assert day_range_to_bounds(None, None) == (None, None)

        start, end = day_range_to_bounds(date(2024, 1, 1), None)
        assert start == 1704067200000
        assert end is None

    def test_single_day_range(self):
        start, end = day_range_to_bounds(date(2024, 1, 1), date(2024, 1, 1))

        assert end - start == DAY_MS - 1


class TestStartOfDay:
    def test_truncates(self):
        ts = datetime_to_ms(datetime(2024, 1, 2, 15, 45, tzinfo=timezone.utc))

        assert start_of_day_ms(ts) == datetime_to_ms(datetime(2024, 1, 2, tzinfo=timezone.utc))

    def test_local_day(self):
        ts = datetime_to_ms(datetime(2024, 1, 2, 23, 30, tzinfo=timezone.utc))

        assert start_of_day_ms(ts, AMSTERDAM) == day_start_ms(date(2024, 1, 3), AMSTERDAM)
