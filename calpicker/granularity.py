"""Calendar granularities and the drill-down/drill-up navigation state machine."""

from enum import Enum


class Granularity(Enum):
    """Resolution at which a date is displayed and selected, coarse to fine."""

    YEAR = "year"
    MONTH = "month"
    DATE = "date"

    @property
    def rank(self) -> int:
        return _ORDER.index(self)

    @property
    def finer(self) -> "Granularity | None":
        """The next finer granularity, or None at DATE."""
        idx = self.rank + 1
        return _ORDER[idx] if idx < len(_ORDER) else None

    @property
    def coarser(self) -> "Granularity | None":
        """The next coarser granularity, or None at YEAR."""
        idx = self.rank - 1
        return _ORDER[idx] if idx >= 0 else None

    @classmethod
    def parse(cls, value: "Granularity | str") -> "Granularity":
        if isinstance(value, Granularity):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        valid = ", ".join(repr(g.value) for g in cls)
        raise ValueError(f"Invalid granularity {value!r}. Valid granularities: {valid}")


_ORDER = (Granularity.YEAR, Granularity.MONTH, Granularity.DATE)


class GranularityNavigator:
    """Track which granularity is on screen while the user browses.

    The target granularity is fixed: it is the resolution values are committed
    at. The active granularity starts at the target and moves one level at a
    time, up toward YEAR when the user zooms out and back down toward the
    target when a cell is activated.

    The navigator also remembers the anchor, the timestamp the displayed
    calendar is centered on.
    """

    def __init__(self, target: Granularity, anchor: int | None = None) -> None:
        self._target: Granularity = target
        self._active: Granularity = target
        self.anchor: int | None = anchor

    @property
    def target(self) -> Granularity:
        return self._target

    @property
    def active(self) -> Granularity:
        return self._active

    @property
    def at_target(self) -> bool:
        """True when a cell activation should commit rather than drill down."""
        return self._active is self._target

    def drill_down(self, anchor: int | None) -> bool:
        """Move one level finer (YEAR→MONTH→DATE), never past the target.

        The anchor is always updated, even when the level cannot change.
        Returns True if the active granularity changed.
        """
        self.anchor = anchor
        finer = self._active.finer
        if self.at_target or finer is None:
            return False
        self._active = finer
        return True

    def drill_up(self, anchor: int | None) -> bool:
        """Move one level coarser (DATE→MONTH→YEAR); no-op at YEAR.

        Returns True if the active granularity changed.
        """
        coarser = self._active.coarser
        if coarser is None:
            return False
        self._active = coarser
        self.anchor = anchor
        return True

    def reset(self, anchor: int | None) -> None:
        """Jump straight back to the target granularity."""
        self._active = self._target
        self.anchor = anchor

    def __repr__(self) -> str:
        return (
            f"GranularityNavigator(target={self._target.value}, "
            f"active={self._active.value}, anchor={self.anchor})"
        )
