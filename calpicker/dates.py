"""Conversions between date-like values and millisecond timestamps.

Every public API accepts a ``DateLike``: an epoch timestamp in milliseconds,
a ``datetime`` or a ``date``. They are normalized here to a single integer
representation. Calendar arithmetic (month lengths, leap years) is delegated
to python-dateutil's ``relativedelta`` and always happens in the picker's
timezone so that "the month of March" means the local March.
"""

import math
from datetime import date, datetime, time, timedelta, timezone
from time import time as current_time
from typing import Literal, TypeAlias
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from calpicker.granularity import Granularity

DateLike: TypeAlias = int | float | datetime | date | None

_ONE_MS = relativedelta(microseconds=1000)
_MS_DELTA = timedelta(milliseconds=1)
_UTC = ZoneInfo("UTC")


def to_timestamp(value: DateLike, zone: ZoneInfo) -> int | None:
    """Normalize a date-like value to epoch milliseconds.

    Accepts:
    - int/float: Epoch milliseconds (floats are truncated)
    - datetime: Naive values are taken as wall-clock time in ``zone``
    - date: Midnight of that day in ``zone``
    - None: Passed through

    Raises:
        TypeError: If value is of an unsupported type
        ValueError: If a numeric value is not finite
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError(f"Expected a date-like value, got bool: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Timestamp must be finite, got {value!r}")
        return int(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=zone)
        return _datetime_to_ms(value)
    if isinstance(value, date):
        return _datetime_to_ms(datetime.combine(value, time.min, tzinfo=zone))
    raise TypeError(
        f"Expected int, float, datetime, date, or None.\n"
        f"Got {type(value).__name__!r}: {value!r}\n"
        f"Examples:\n"
        f"  picker.set_date(1420070400000)  # epoch milliseconds\n"
        f"  picker.set_date(datetime(2015, 1, 1, tzinfo=timezone.utc))\n"
        f"  picker.set_date(date(2015, 1, 1))"
    )


def from_timestamp(ts: int, zone: ZoneInfo) -> datetime:
    """Convert epoch milliseconds to an aware datetime in ``zone``."""
    return (_EPOCH + timedelta(milliseconds=ts)).astimezone(zone)


def is_valid_timestamp(ts: object, zone: ZoneInfo = _UTC) -> bool:
    """True if ``ts`` is an integer that maps onto a real calendar instant in ``zone``."""
    if isinstance(ts, bool) or not isinstance(ts, int):
        return False
    try:
        from_timestamp(ts, zone)
    except (OverflowError, ValueError, OSError):
        return False
    return True


def granularity_span(
    ts: int, granularity: Granularity, zone: ZoneInfo
) -> tuple[int, int]:
    """Return the first and last millisecond of the period containing ``ts``.

    YEAR spans Jan 1 00:00:00.000 to Dec 31 23:59:59.999, MONTH spans the
    first to the last instant of the month, and DATE spans the whole day so
    that time-of-day never affects a bounds check.
    """
    dt = from_timestamp(ts, zone)
    if granularity is Granularity.YEAR:
        first = dt.replace(month=1, day=1)
        step = relativedelta(years=1)
    elif granularity is Granularity.MONTH:
        first = dt.replace(day=1)
        step = relativedelta(months=1)
    else:
        first = dt
        step = relativedelta(days=1)
    first = datetime.combine(first.date(), time.min, tzinfo=zone)
    last = first + step - _ONE_MS
    return _datetime_to_ms(first), _datetime_to_ms(last)


def period_edge(
    ts: int, granularity: Granularity, zone: ZoneInfo, edge: Literal["start", "end"]
) -> int:
    """One edge of ``granularity_span``."""
    start, end = granularity_span(ts, granularity, zone)
    return start if edge == "start" else end


def same_at(a: int, b: int, granularity: Granularity, zone: ZoneInfo) -> bool:
    """True if both timestamps fall in the same year, month, or day."""
    da = from_timestamp(a, zone)
    db = from_timestamp(b, zone)
    if granularity is Granularity.YEAR:
        return da.year == db.year
    if granularity is Granularity.MONTH:
        return (da.year, da.month) == (db.year, db.month)
    return da.date() == db.date()


def start_of_day(ts: int, zone: ZoneInfo) -> int:
    return period_edge(ts, Granularity.DATE, zone, "start")


def with_time(ts: int, hour: int, minute: int, zone: ZoneInfo) -> int:
    """Replace hour and minute, keeping seconds and milliseconds."""
    dt = from_timestamp(ts, zone).replace(hour=hour, minute=minute)
    return _datetime_to_ms(dt)


def now_timestamp() -> int:
    return int(current_time() * 1000)


def _datetime_to_ms(dt: datetime) -> int:
    # Aware subtraction never builds an intermediate datetime, so values near
    # date.min or date.max convert even when shifting them to UTC would overflow
    return (dt - _EPOCH) // _MS_DELTA


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
