"""Tests for date-like normalization and calendar spans."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from calpicker.dates import (
    from_timestamp,
    granularity_span,
    is_valid_timestamp,
    same_at,
    start_of_day,
    to_timestamp,
    with_time,
)
from calpicker.granularity import Granularity

UTC = ZoneInfo("UTC")
SEOUL = ZoneInfo("Asia/Seoul")
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def ms(*args: int) -> int:
    return (datetime(*args, tzinfo=timezone.utc) - EPOCH) // timedelta(milliseconds=1)


def test_to_timestamp_accepts_each_date_like() -> None:
    assert to_timestamp(1420070400000, UTC) == 1420070400000
    assert to_timestamp(1420070400000.9, UTC) == 1420070400000
    assert to_timestamp(date(2015, 1, 1), UTC) == 1420070400000
    assert to_timestamp(datetime(2015, 1, 1, tzinfo=timezone.utc), UTC) == 1420070400000
    assert to_timestamp(None, UTC) is None


def test_naive_datetimes_use_the_picker_zone() -> None:
    assert to_timestamp(datetime(2015, 1, 1), SEOUL) == ms(2014, 12, 31, 15)
    assert to_timestamp(date(2015, 1, 1), SEOUL) == ms(2014, 12, 31, 15)


def test_aware_datetimes_keep_their_zone() -> None:
    value = datetime(2015, 1, 1, 9, tzinfo=SEOUL)

    assert to_timestamp(value, UTC) == ms(2015, 1, 1)


def test_to_timestamp_rejects_unsupported_values() -> None:
    with pytest.raises(TypeError):
        to_timestamp("2015-01-01", UTC)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        to_timestamp(True, UTC)
    with pytest.raises(ValueError):
        to_timestamp(float("nan"), UTC)


def test_from_timestamp() -> None:
    assert from_timestamp(ms(2015, 1, 1), UTC) == datetime(2015, 1, 1, tzinfo=UTC)
    assert from_timestamp(-1, UTC) == datetime(
        1969, 12, 31, 23, 59, 59, 999000, tzinfo=UTC
    )
    assert from_timestamp(ms(2015, 1, 1), SEOUL).hour == 9


def test_is_valid_timestamp() -> None:
    assert is_valid_timestamp(0)
    assert is_valid_timestamp(ms(1900, 1, 1))
    assert not is_valid_timestamp(10**18)
    assert not is_valid_timestamp("0")
    assert not is_valid_timestamp(True)
    assert not is_valid_timestamp(None)


def test_validity_depends_on_zone_near_the_calendar_edges() -> None:
    late = ms(9999, 12, 31, 23)
    assert is_valid_timestamp(late)
    assert not is_valid_timestamp(late, SEOUL)

    early = to_timestamp(date(1, 1, 1), SEOUL)
    assert early is not None and early < ms(1, 1, 1)
    assert not is_valid_timestamp(early, SEOUL)


class TestGranularitySpan:
    """Spans cover the whole year, month or day containing the instant."""

    def test_year(self):
        start, end = granularity_span(ms(2016, 6, 15, 12), Granularity.YEAR, UTC)

        assert start == ms(2016, 1, 1)
        assert end == ms(2017, 1, 1) - 1

    def test_month_in_leap_year(self):
        start, end = granularity_span(ms(2016, 2, 10), Granularity.MONTH, UTC)

        assert start == ms(2016, 2, 1)
        assert end == ms(2016, 3, 1) - 1

    def test_date_ignores_time_of_day(self):
        start, end = granularity_span(ms(2015, 1, 15, 18, 45), Granularity.DATE, UTC)

        assert start == ms(2015, 1, 15)
        assert end == ms(2015, 1, 16) - 1

    def test_day_boundaries_follow_the_zone(self):
        start, end = granularity_span(ms(2015, 1, 1), Granularity.DATE, SEOUL)

        assert start == ms(2014, 12, 31, 15)
        assert end == ms(2015, 1, 1, 15) - 1


def test_same_at_each_granularity() -> None:
    a = ms(2015, 3, 10, 8)
    b = ms(2015, 3, 10, 22)
    c = ms(2015, 3, 28)
    d = ms(2015, 11, 1)

    assert same_at(a, b, Granularity.DATE, UTC)
    assert not same_at(a, c, Granularity.DATE, UTC)
    assert same_at(a, c, Granularity.MONTH, UTC)
    assert not same_at(a, d, Granularity.MONTH, UTC)
    assert same_at(a, d, Granularity.YEAR, UTC)


def test_with_time_keeps_seconds() -> None:
    assert with_time(ms(2015, 1, 1, 10, 20, 30), 5, 6, UTC) == ms(2015, 1, 1, 5, 6, 30)


def test_start_of_day() -> None:
    assert start_of_day(ms(2015, 1, 1, 23, 59), UTC) == ms(2015, 1, 1)
