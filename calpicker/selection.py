"""The committed value of a picker and the rules for accepting a new one."""

from datetime import datetime
from zoneinfo import ZoneInfo

from calpicker.dates import from_timestamp, granularity_span, is_valid_timestamp, same_at
from calpicker.granularity import Granularity
from calpicker.ranges import IntervalSet


class SelectionState:
    """Own the current value and decide what may become the current value.

    Values are millisecond timestamps. Nothing here notifies anyone:
    ``commit`` and ``clear`` report whether the value changed and the caller
    decides what to announce.
    """

    def __init__(
        self,
        ranges: IntervalSet,
        granularity: Granularity,
        zone: ZoneInfo,
    ) -> None:
        self.ranges: IntervalSet = ranges
        self.granularity: Granularity = granularity
        self.zone: ZoneInfo = zone
        self._value: int | None = None

    @property
    def value(self) -> int | None:
        return self._value

    @property
    def value_datetime(self) -> datetime | None:
        if self._value is None:
            return None
        return from_timestamp(self._value, self.zone)

    def is_selectable(self, ts: int | None, granularity: Granularity | None = None) -> bool:
        """True if any instant of the period containing ``ts`` is in range.

        The period is the full year, month or day depending on
        ``granularity`` (the state's own granularity when omitted).
        """
        if ts is None or not is_valid_timestamp(ts, self.zone):
            return False
        try:
            start, end = granularity_span(ts, granularity or self.granularity, self.zone)
        except (OverflowError, ValueError):
            return False
        return self.ranges.has_overlap(start, end)

    def is_selected(self, ts: int | None, granularity: Granularity | None = None) -> bool:
        """True if ``ts`` matches the current value at the given resolution."""
        if self._value is None or ts is None or not is_valid_timestamp(ts, self.zone):
            return False
        return same_at(self._value, ts, granularity or self.granularity, self.zone)

    def commit(self, ts: int | None) -> bool:
        """Accept ``ts`` as the new value if it is selectable and different."""
        if ts is None or ts == self._value or not self.is_selectable(ts):
            return False
        self._value = ts
        return True

    def clear(self) -> bool:
        """Drop the current value. Returns True if there was one."""
        changed = self._value is not None
        self._value = None
        return changed

    def __repr__(self) -> str:
        return (
            f"SelectionState(value={self._value}, "
            f"granularity={self.granularity.value}, ranges={self.ranges!r})"
        )
