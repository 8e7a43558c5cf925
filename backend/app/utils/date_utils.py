# backend/app/utils/date_utils.py
"""
Date and timestamp helpers.

All stored times are integer epoch milliseconds. Users filter by calendar
days, so a date-only bound must be widened to cover the WHOLE day:

    start = midnight(from_date)
    end   = midnight(to_date) + 1 day - 1 millisecond

Every inclusive day-range filter in the application goes through
day_range_to_bounds() so the convention is applied consistently.

Usage:
    from app.utils.date_utils import day_range_to_bounds

    start_ms, end_ms = day_range_to_bounds(date(2024, 1, 1), date(2024, 1, 31), tz)
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def day_start_ms(d: date, tz: tzinfo = timezone.utc) -> int:
    """Epoch milliseconds of local midnight at the start of `d`."""
    return datetime_to_ms(datetime.combine(d, time.min, tzinfo=tz))


def day_end_ms(d: date, tz: tzinfo = timezone.utc) -> int:
    """
    Last millisecond of `d` (inclusive upper bound for a date-only input).

    Uses the next local midnight, so days shortened or lengthened by a DST
    change are still covered exactly.
    """
    next_day = datetime.combine(d + timedelta(days=1), time.min, tzinfo=tz)
    return datetime_to_ms(next_day) - 1


def day_range_to_bounds(
        from_date: date | None,
        to_date: date | None,
        tz: tzinfo = timezone.utc,
) -> tuple[int | None, int | None]:
    """
    Convert an optional inclusive date range to epoch-ms bounds.

    Args:
        from_date: First day (None = unbounded)
        to_date: Last day, included entirely (None = unbounded)
        tz: Timezone that defines where days start

    Returns:
        Tuple of (start_ms, end_ms), either may be None
    """
    start = day_start_ms(from_date, tz) if from_date is not None else None
    end = day_end_ms(to_date, tz) if to_date is not None else None
    return start, end


def start_of_day_ms(timestamp_ms: int, tz: tzinfo = timezone.utc) -> int:
    """Truncate an epoch-ms timestamp to the start of its local day."""
    local = ms_to_datetime(timestamp_ms).astimezone(tz)
    return day_start_ms(local.date(), tz)


def datetime_to_ms(value: datetime) -> int:
    """Convert a datetime to epoch ms (naive datetimes are taken as UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // _ONE_MS


def ms_to_datetime(timestamp_ms: int) -> datetime:
    """Convert epoch ms to an aware UTC datetime."""
    return _EPOCH + timedelta(milliseconds=timestamp_ms)


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return datetime_to_ms(datetime.now(timezone.utc))
