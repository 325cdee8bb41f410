"""Normalized sets of closed millisecond intervals.

``IntervalSet`` keeps its intervals sorted by start, pairwise disjoint and
minimal after every mutation: anything that overlaps, touches or sits
immediately next to another interval (``a.end + 1 == b.start``) is merged.
Because ends are integers, subtracting ``[s, e]`` leaves fragments that end
at ``s - 1`` and start at ``e + 1``, and adding ``[s, e]`` back restores the
original interval.
"""

import bisect
import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from calpicker.errors import EmptySetError
from calpicker.interval import Interval

logger = logging.getLogger(__name__)


def _ordered(start: int, end: int) -> tuple[int, int]:
    for bound in (start, end):
        if isinstance(bound, bool) or not isinstance(bound, int):
            raise TypeError(
                f"Interval bounds must be integer millisecond timestamps.\n"
                f"Got {type(bound).__name__!r}: {bound!r}"
            )
    return (start, end) if start <= end else (end, start)


class IntervalSet:
    """A sorted, merged collection of closed intervals.

    Attributes:
        _intervals: Disjoint, non-adjacent intervals sorted by start (and
            therefore also by end)
    """

    def __init__(self, pairs: Iterable[Sequence[int]] = ()) -> None:
        """Build the canonical form of ``pairs``.

        Args:
            pairs: ``(t0, t1)`` pairs; each pair may arrive reversed

        Raises:
            ValueError: If an entry is not a pair
            TypeError: If a bound is not an integer
        """
        self._intervals: list[Interval] = []
        for pair in pairs:
            if len(pair) != 2:
                raise ValueError(f"Expected a (start, end) pair, got {pair!r}")
            self.add(pair[0], pair[1])

    @property
    def intervals(self) -> tuple[Interval, ...]:
        return tuple(self._intervals)

    def to_pairs(self) -> list[tuple[int, int]]:
        """Canonical ``(start, end)`` pairs, suitable for rebuilding the set."""
        return [(interval.start, interval.end) for interval in self._intervals]

    def copy(self) -> "IntervalSet":
        clone = IntervalSet()
        clone._intervals = list(self._intervals)
        return clone

    def add(self, start: int, end: int) -> None:
        """Insert ``[start, end]``, merging every interval it overlaps or touches."""
        start, end = _ordered(start, end)

        # Intervals are disjoint, so ends are sorted too: everything in
        # [lo, hi) reaches within one millisecond of the new range.
        lo = bisect.bisect_left(self._intervals, start - 1, key=lambda i: i.end)
        hi = bisect.bisect_right(self._intervals, end + 1, key=lambda i: i.start)

        merged = self._intervals[lo:hi]
        if merged:
            start = min(start, merged[0].start)
            end = max(end, merged[-1].end)

        self._intervals[lo:hi] = [Interval(start=start, end=end)]
        logger.debug("added [%d, %d]; %d interval(s)", start, end, len(self))

    def subtract(self, start: int, end: int) -> None:
        """Remove ``[start, end]``, shrinking or splitting what it overlaps."""
        start, end = _ordered(start, end)

        lo = bisect.bisect_left(self._intervals, start, key=lambda i: i.end)
        hi = bisect.bisect_right(self._intervals, end, key=lambda i: i.start)

        remaining: list[Interval] = []
        for interval in self._intervals[lo:hi]:
            # Fragment before the hole
            if interval.start < start:
                remaining.append(Interval(start=interval.start, end=start - 1))
            # Fragment after the hole
            if interval.end > end:
                remaining.append(Interval(start=end + 1, end=interval.end))

        self._intervals[lo:hi] = remaining
        logger.debug("subtracted [%d, %d]; %d interval(s)", start, end, len(self))

    def has_overlap(self, start: int, end: int) -> bool:
        """True if any stored interval shares an instant with ``[start, end]``."""
        start, end = _ordered(start, end)
        idx = bisect.bisect_left(self._intervals, start, key=lambda i: i.end)
        return idx < len(self._intervals) and self._intervals[idx].overlaps(start, end)

    def contains(self, timestamp: int) -> bool:
        return self.has_overlap(timestamp, timestamp)

    def get_minimum(self) -> int:
        """Smallest start across all intervals.

        Raises:
            EmptySetError: If the set holds no intervals
        """
        if not self._intervals:
            raise EmptySetError(
                "Cannot take the minimum of an empty interval set.\n"
                "Hint: treat an empty set as 'nothing is selectable'"
            )
        return self._intervals[0].start

    def get_maximum(self) -> int:
        """Largest end across all intervals.

        Raises:
            EmptySetError: If the set holds no intervals
        """
        if not self._intervals:
            raise EmptySetError(
                "Cannot take the maximum of an empty interval set.\n"
                "Hint: treat an empty set as 'nothing is selectable'"
            )
        return self._intervals[-1].end

    def __len__(self) -> int:
        return len(self._intervals)

    def __bool__(self) -> bool:
        return bool(self._intervals)

    def __iter__(self) -> Iterator[Interval]:
        return iter(tuple(self._intervals))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, IntervalSet):
            return NotImplemented
        return self._intervals == other._intervals

    def __repr__(self) -> str:
        pairs = ", ".join(f"[{i.start}, {i.end}]" for i in self._intervals)
        return f"IntervalSet([{pairs}])"
