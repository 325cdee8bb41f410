import pytest

from calpicker.interval import Interval


def test_rejects_reversed_bounds() -> None:
    with pytest.raises(ValueError):
        Interval(start=10, end=5)


def test_single_instant_interval() -> None:
    interval = Interval(start=5, end=5)

    assert interval.overlaps(5, 5)
    assert not interval.overlaps(6, 10)
    assert str(interval) == "Interval(5→5, 1ms)"


def test_overlaps_is_closed_on_both_ends() -> None:
    interval = Interval(start=10, end=20)

    assert interval.overlaps(0, 10)
    assert interval.overlaps(20, 30)
    assert not interval.overlaps(0, 9)
    assert not interval.overlaps(21, 30)
