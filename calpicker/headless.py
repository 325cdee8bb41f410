"""In-memory collaborators for driving a picker without a UI toolkit.

These implement every interface from ``calpicker.collaborators`` with plain
Python state. They are useful for testing, scripting and prototyping: the
calendar computes its cells and remembers the last decoration it was given,
the input parses with ``strptime`` formats, and user interactions are
simulated with methods like ``HeadlessInput.type_text`` or
``HeadlessDocument.press``.

Example:
    >>> from calpicker import Datepicker
    >>> from calpicker.headless import HeadlessCalendar, HeadlessDocument, HeadlessInput
    >>>
    >>> calendar, doc, field = HeadlessCalendar(), HeadlessDocument(), HeadlessInput()
    >>> picker = Datepicker(calendar, date_input=field, document=doc)
    >>> field.click()           # opens the picker
    >>> doc.press(object())     # outside click closes it
"""

import calendar as _calendar
from collections.abc import Callable, Sequence
from datetime import datetime, time
from typing import Any, Literal
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta
from typing_extensions import override

from calpicker.collaborators import (
    Calendar,
    CellState,
    DateInput,
    Document,
    DrawDecoration,
    NavButton,
    Opener,
    TimeChange,
    TimePicker,
)
from calpicker.dates import to_timestamp
from calpicker.errors import ParsingError
from calpicker.events import EventEmitter, Subscription
from calpicker.granularity import Granularity
from calpicker.locale import DEFAULT_LANGUAGE, get_locale_text
from calpicker.options import DEFAULT_FORMAT
from calpicker.util import DEFAULT_TZ

# Years shown on one page of the year grid
YEARS_PER_PAGE = 12

# Step used by next/prev for each displayed granularity
_PAGE_STEP = {
    Granularity.DATE: relativedelta(months=1),
    Granularity.MONTH: relativedelta(years=1),
    Granularity.YEAR: relativedelta(years=YEARS_PER_PAGE),
}


class HeadlessCalendar(Calendar):
    """Calendar grid kept as data.

    Attributes:
        options: Option block received from the picker
        visible: Whether the picker layer is shown
        decoration: Last decoration received, None before the first draw
        draw_count: Number of draws so far
    """

    def __init__(
        self,
        date: datetime | None = None,
        granularity: Granularity = Granularity.DATE,
        tz: str = DEFAULT_TZ,
    ) -> None:
        self._events = EventEmitter()
        self._zone: ZoneInfo = ZoneInfo(tz)
        self._type: Granularity = granularity
        self._date: datetime = self._localize(date) if date else datetime.now(self._zone)
        self.options: dict[str, Any] = {}
        self.visible: bool = True
        self.decoration: DrawDecoration | None = None
        self.draw_count: int = 0
        self.destroyed: bool = False

    def _localize(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=self._zone)
        return value.astimezone(self._zone)

    @override
    def configure(self, options: dict[str, Any]) -> None:
        self.options = dict(options)
        if "tz" in options:
            self._zone = ZoneInfo(options["tz"])
            self._date = self._date.astimezone(self._zone)
        if "type" in options:
            self._type = Granularity.parse(options["type"])

    @override
    def draw(
        self, date: datetime | None = None, granularity: Granularity | None = None
    ) -> None:
        if date is not None:
            self._date = self._localize(date)
        if granularity is not None:
            self._type = granularity
        self.draw_count += 1
        self._events.fire("draw", self.cells())

    def cells(self) -> list[int]:
        """Timestamps of the cells on the current page, at midnight local time."""
        year, month = self._date.year, self._date.month
        if self._type is Granularity.DATE:
            days = _calendar.monthrange(year, month)[1]
            starts = [self._midnight(year, month, day) for day in range(1, days + 1)]
        elif self._type is Granularity.MONTH:
            starts = [self._midnight(year, m, 1) for m in range(1, 13)]
        else:
            first = year - year % YEARS_PER_PAGE
            starts = [self._midnight(y, 1, 1) for y in range(first, first + YEARS_PER_PAGE)]
        return [to_timestamp(start, self._zone) for start in starts]  # type: ignore[misc]

    def _midnight(self, year: int, month: int, day: int) -> datetime:
        return datetime.combine(datetime(year, month, day).date(), time.min, tzinfo=self._zone)

    @property
    def title(self) -> str:
        texts = get_locale_text(self.options.get("language", DEFAULT_LANGUAGE))
        if self._type is Granularity.YEAR:
            first = self._date.year - self._date.year % YEARS_PER_PAGE
            return f"{first} - {first + YEARS_PER_PAGE - 1}"
        if self._type is Granularity.MONTH:
            return str(self._date.year)
        return texts["title_format"].format(
            month_short=texts["titles"]["MMM"][self._date.month - 1],
            month_num=self._date.month,
            year=self._date.year,
        )

    @override
    def get_type(self) -> Granularity:
        return self._type

    @override
    def get_date(self) -> datetime:
        return self._date

    @override
    def get_next_date(self) -> datetime:
        return self._date + _PAGE_STEP[self._type]

    @override
    def get_prev_date(self) -> datetime:
        return self._date - _PAGE_STEP[self._type]

    @override
    def get_next_year_date(self) -> datetime:
        if self._type is Granularity.YEAR:
            return self.get_next_date()
        return self._date + relativedelta(years=1)

    @override
    def get_prev_year_date(self) -> datetime:
        if self._type is Granularity.YEAR:
            return self.get_prev_date()
        return self._date - relativedelta(years=1)

    @override
    def decorate(self, decoration: DrawDecoration) -> None:
        self.decoration = decoration

    def cell(self, value: datetime | int) -> CellState:
        """Decoration of the cell showing ``value``.

        Raises:
            KeyError: If no such cell was drawn
        """
        ts = to_timestamp(value, self._zone)
        if self.decoration is not None:
            for state in self.decoration.cells:
                if state.timestamp == ts:
                    return state
        raise KeyError(f"No cell drawn for {value!r}")

    @property
    def hidden_buttons(self) -> frozenset[NavButton]:
        if self.decoration is None:
            return frozenset()
        return self.decoration.hidden_buttons

    @override
    def set_visible(self, visible: bool) -> None:
        self.visible = visible

    @override
    def contains(self, target: object) -> bool:
        return target is self

    @override
    def on(self, name: Literal["draw"], handler: Callable[[Sequence[int]], Any]) -> Subscription:
        return self._events.on(name, handler)

    @override
    def destroy(self) -> None:
        self._events.clear()
        self.destroyed = True


class HeadlessTimePicker(TimePicker):
    def __init__(self, hour: int = 0, minute: int = 0) -> None:
        self._events = EventEmitter()
        self.hour: int = hour
        self.minute: int = minute
        self.destroyed: bool = False

    @override
    def get_hour(self) -> int:
        return self.hour

    @override
    def get_minute(self) -> int:
        return self.minute

    @override
    def set_time(self, hour: int, minute: int) -> None:
        self.hour, self.minute = hour, minute

    def change_time(self, hour: int, minute: int) -> None:
        """Simulate the user picking a time."""
        self.set_time(hour, minute)
        self._events.fire("change", TimeChange(hour, minute))

    @override
    def on(self, name: Literal["change"], handler: Callable[[TimeChange], Any]) -> Subscription:
        return self._events.on(name, handler)

    @override
    def destroy(self) -> None:
        self._events.clear()
        self.destroyed = True


class HeadlessInput(DateInput):
    """Text field using ``strftime``/``strptime`` formats."""

    def __init__(self, text: str = "", format: str | None = None) -> None:
        self._events = EventEmitter()
        self.text: str = text
        self.format: str = format or DEFAULT_FORMAT
        self.disabled: bool = False
        self.destroyed: bool = False

    @override
    def get_date(self) -> datetime:
        try:
            return datetime.strptime(self.text.strip(), self.format)
        except ValueError as exc:
            raise ParsingError(
                f"Cannot parse {self.text!r} with format {self.format!r}: {exc}"
            ) from exc

    @override
    def set_date(self, value: datetime) -> None:
        self.text = value.strftime(self.format)

    @override
    def get_format(self) -> str | None:
        return self.format

    @override
    def set_format(self, fmt: str | None) -> None:
        self.format = fmt or DEFAULT_FORMAT

    @override
    def clear_text(self) -> None:
        self.text = ""

    @override
    def enable(self) -> None:
        self.disabled = False

    @override
    def disable(self) -> None:
        self.disabled = True

    def type_text(self, text: str) -> None:
        """Simulate the user editing the text and committing the edit."""
        if self.disabled:
            return
        self.text = text
        self._events.fire("changed")

    def click(self) -> None:
        if not self.disabled:
            self._events.fire("activated")

    @override
    def contains(self, target: object) -> bool:
        return target is self

    @override
    def on(
        self, name: Literal["changed", "activated"], handler: Callable[[], Any]
    ) -> Subscription:
        return self._events.on(name, handler)

    @override
    def destroy(self) -> None:
        self._events.clear()
        self.destroyed = True


class HeadlessOpener(Opener):
    def __init__(self, name: str = "opener") -> None:
        self._events = EventEmitter()
        self.name: str = name
        self.disabled: bool = False

    @override
    def bind(self, handler: Callable[[], Any]) -> Subscription:
        return self._events.on("activate", handler)

    def activate(self) -> None:
        """Simulate a click on the opener."""
        if not self.disabled:
            self._events.fire("activate")

    @property
    def binding_count(self) -> int:
        return self._events.listener_count("activate")

    @override
    def set_disabled(self, disabled: bool) -> None:
        self.disabled = disabled

    @override
    def contains(self, target: object) -> bool:
        return target is self

    def __repr__(self) -> str:
        return f"HeadlessOpener({self.name!r})"


class HeadlessDocument(Document):
    """Global interaction source shared by any number of pickers."""

    def __init__(self) -> None:
        self._events = EventEmitter()

    @override
    def listen(self, handler: Callable[[object], Any]) -> Subscription:
        return self._events.on("interaction", handler)

    def press(self, target: object) -> None:
        """Simulate a mousedown/touchstart anywhere in the document."""
        self._events.fire("interaction", target)

    @property
    def listener_count(self) -> int:
        return self._events.listener_count("interaction")
