"""Interfaces of the components a picker drives but does not implement.

A picker never holds references to rendered elements. The calendar reports
which cells it drew and the picker answers with a ``DrawDecoration``
describing how to mark them; the renderer applies it fresh on every draw.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from calpicker.events import Subscription
from calpicker.granularity import Granularity


class NavButton(Enum):
    PREV_MONTH = "prev-month"
    NEXT_MONTH = "next-month"
    PREV_YEAR = "prev-year"
    NEXT_YEAR = "next-year"


@dataclass(frozen=True, kw_only=True)
class CellState:
    """How one rendered calendar cell should be marked."""

    timestamp: int
    selectable: bool
    selected: bool
    today: bool


@dataclass(frozen=True, kw_only=True)
class DrawDecoration:
    cells: tuple[CellState, ...]
    hidden_buttons: frozenset[NavButton]


@dataclass(frozen=True)
class TimeChange:
    hour: int
    minute: int


@dataclass(frozen=True)
class ErrorEvent:
    """Payload of a picker's ``error`` notification."""

    kind: Literal["ParsingError"]
    message: str


class Calendar(ABC):
    """Calendar grid renderer.

    Fires ``"draw"`` with a sequence of cell timestamps every time it redraws.
    """

    def configure(self, options: dict[str, Any]) -> None:
        """Receive the picker's ``calendar`` option block (plus language and type)."""
        pass

    @abstractmethod
    def draw(
        self, date: datetime | None = None, granularity: Granularity | None = None
    ) -> None:
        """Redraw, optionally re-anchoring and switching granularity."""
        pass

    @abstractmethod
    def get_type(self) -> Granularity:
        pass

    @abstractmethod
    def get_date(self) -> datetime:
        """The anchor of the displayed grid."""
        pass

    @abstractmethod
    def get_next_date(self) -> datetime:
        pass

    @abstractmethod
    def get_prev_date(self) -> datetime:
        pass

    @abstractmethod
    def get_next_year_date(self) -> datetime:
        pass

    @abstractmethod
    def get_prev_year_date(self) -> datetime:
        pass

    @abstractmethod
    def decorate(self, decoration: DrawDecoration) -> None:
        pass

    @abstractmethod
    def set_visible(self, visible: bool) -> None:
        pass

    @abstractmethod
    def contains(self, target: object) -> bool:
        """True if an interaction target lies inside the picker layer."""
        pass

    @abstractmethod
    def on(self, name: Literal["draw"], handler: Callable[[Sequence[int]], Any]) -> Subscription:
        pass

    def destroy(self) -> None:
        pass


class TimePicker(ABC):
    """Hour/minute sub-widget. Fires ``"change"`` with a ``TimeChange``."""

    @abstractmethod
    def get_hour(self) -> int:
        pass

    @abstractmethod
    def get_minute(self) -> int:
        pass

    @abstractmethod
    def set_time(self, hour: int, minute: int) -> None:
        pass

    @abstractmethod
    def on(self, name: Literal["change"], handler: Callable[[TimeChange], Any]) -> Subscription:
        pass

    def destroy(self) -> None:
        pass


class DateInput(ABC):
    """Text field bound to a picker.

    Fires ``"changed"`` when the user edits the text and ``"activated"`` when
    the field is clicked.
    """

    @abstractmethod
    def get_date(self) -> datetime:
        """Parse the current text.

        Raises:
            ParsingError: If the text does not match the format
        """
        pass

    @abstractmethod
    def set_date(self, value: datetime) -> None:
        pass

    @abstractmethod
    def get_format(self) -> str | None:
        pass

    @abstractmethod
    def set_format(self, fmt: str | None) -> None:
        pass

    @abstractmethod
    def clear_text(self) -> None:
        pass

    @abstractmethod
    def enable(self) -> None:
        pass

    @abstractmethod
    def disable(self) -> None:
        pass

    @abstractmethod
    def contains(self, target: object) -> bool:
        pass

    @abstractmethod
    def on(
        self, name: Literal["changed", "activated"], handler: Callable[[], Any]
    ) -> Subscription:
        pass

    def destroy(self) -> None:
        pass


class Opener(ABC):
    """A control that toggles the picker (an icon, a button)."""

    @abstractmethod
    def bind(self, handler: Callable[[], Any]) -> Subscription:
        pass

    @abstractmethod
    def set_disabled(self, disabled: bool) -> None:
        pass

    @abstractmethod
    def contains(self, target: object) -> bool:
        pass


class Document(ABC):
    """Process-wide interaction source used for outside-click dismissal."""

    @abstractmethod
    def listen(self, handler: Callable[[object], Any]) -> Subscription:
        pass
