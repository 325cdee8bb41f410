"""Tests for SelectionState."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from calpicker.granularity import Granularity
from calpicker.ranges import IntervalSet
from calpicker.selection import SelectionState

UTC = ZoneInfo("UTC")
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def ms(*args: int) -> int:
    return (datetime(*args, tzinfo=timezone.utc) - EPOCH) // timedelta(milliseconds=1)


def january_2015() -> SelectionState:
    ranges = IntervalSet([(ms(2015, 1, 1), ms(2015, 1, 31))])
    return SelectionState(ranges, Granularity.DATE, UTC)


def test_selectable_inside_and_outside_range() -> None:
    state = january_2015()

    assert state.is_selectable(ms(2015, 1, 15))
    assert state.is_selectable(ms(2015, 1, 31, 18))
    assert not state.is_selectable(ms(2015, 2, 1))
    assert not state.is_selectable(ms(2014, 12, 31))


def test_removing_a_sub_range() -> None:
    state = january_2015()
    state.ranges.subtract(ms(2015, 1, 10), ms(2015, 1, 20))

    assert not state.is_selectable(ms(2015, 1, 15))
    assert state.is_selectable(ms(2015, 1, 5))


def test_selectable_at_coarser_granularities() -> None:
    state = january_2015()

    assert state.is_selectable(ms(2015, 1, 20), Granularity.MONTH)
    assert not state.is_selectable(ms(2014, 12, 5), Granularity.MONTH)
    assert state.is_selectable(ms(2015, 7, 1), Granularity.YEAR)
    assert not state.is_selectable(ms(2016, 1, 1), Granularity.YEAR)


def test_time_of_day_ignored_for_dates() -> None:
    ranges = IntervalSet([(ms(2015, 1, 1, 12), ms(2015, 1, 1, 13))])
    state = SelectionState(ranges, Granularity.DATE, UTC)

    assert state.is_selectable(ms(2015, 1, 1, 8))
    assert not state.is_selectable(ms(2015, 1, 2, 12))


def test_invalid_dates_are_never_selectable() -> None:
    state = SelectionState(IntervalSet([(-(10**17), 10**17)]), Granularity.DATE, UTC)

    assert not state.is_selectable(None)
    assert not state.is_selectable(10**18)
    assert not state.commit(10**18)


def test_commit_only_on_change() -> None:
    state = january_2015()

    assert state.commit(ms(2015, 1, 15))
    assert state.value == ms(2015, 1, 15)
    assert not state.commit(ms(2015, 1, 15))
    assert state.commit(ms(2015, 1, 15, 0, 0, 0, 1000))


def test_commit_rejects_unselectable() -> None:
    state = january_2015()
    state.commit(ms(2015, 1, 15))

    assert not state.commit(ms(2015, 3, 1))
    assert not state.commit(None)
    assert state.value == ms(2015, 1, 15)


def test_is_selected_resolution() -> None:
    state = january_2015()
    assert not state.is_selected(ms(2015, 1, 15))

    state.commit(ms(2015, 1, 15, 9))

    assert state.is_selected(ms(2015, 1, 15, 23))
    assert not state.is_selected(ms(2015, 1, 16))
    assert state.is_selected(ms(2015, 1, 2), Granularity.MONTH)
    assert state.is_selected(ms(2015, 12, 2), Granularity.YEAR)
    assert not state.is_selected(ms(2016, 1, 15), Granularity.YEAR)


def test_clear_reports_change() -> None:
    state = january_2015()
    state.commit(ms(2015, 1, 15))

    assert state.clear()
    assert state.value is None
    assert state.value_datetime is None
    assert not state.clear()


def test_nothing_is_selectable_once_ranges_are_empty() -> None:
    state = january_2015()
    state.ranges.subtract(ms(2015, 1, 1), ms(2015, 1, 31))

    for day in (ms(2014, 12, 31), ms(2015, 1, 1), ms(2015, 1, 15), ms(2015, 1, 31)):
        assert not state.is_selectable(day)
        assert not state.commit(day)
    assert not state.is_selectable(ms(2015, 1, 1), Granularity.YEAR)
