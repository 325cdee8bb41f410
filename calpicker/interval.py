from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class Interval:
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"Interval start ({self.start}) must be <= end ({self.end})"
            )

    def overlaps(self, start: int, end: int) -> bool:
        """True if this interval shares at least one instant with [start, end]."""
        return start <= self.end and end >= self.start

    def __str__(self) -> str:
        """Human-friendly string showing range and duration."""
        duration = self.end - self.start + 1
        return f"Interval({self.start}→{self.end}, {duration}ms)"
