"""The picker controller.

``Datepicker`` wires the pure core (``IntervalSet``, ``SelectionState``,
``GranularityNavigator``) to the external collaborators: it turns clicks and
text edits into drill navigation or commits, keeps the calendar, the text
input and the time widget in step with the committed value, and publishes
``change``, ``open``, ``close`` and ``error`` notifications.

Example:
    >>> from datetime import date
    >>> from calpicker import Datepicker
    >>> from calpicker.headless import HeadlessCalendar, HeadlessInput
    >>>
    >>> picker = Datepicker(
    ...     HeadlessCalendar(),
    ...     date_input=HeadlessInput(),
    ...     selectable_ranges=[(date(2015, 1, 1), date(2015, 1, 31))],
    ... )
    >>> picker.on("change", lambda: print(picker.get_date()))
    >>> picker.set_date(date(2015, 1, 15))
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from functools import wraps
from typing import Any, TypeVar

from calpicker.collaborators import (
    Calendar,
    CellState,
    DateInput,
    Document,
    DrawDecoration,
    ErrorEvent,
    NavButton,
    Opener,
    TimeChange,
    TimePicker,
)
from calpicker.dates import (
    DateLike,
    from_timestamp,
    is_valid_timestamp,
    now_timestamp,
    period_edge,
    start_of_day,
    to_timestamp,
    with_time,
)
from calpicker.errors import DatepickerError, EmptySetError, ParsingError
from calpicker.events import EventEmitter, Handler, Subscription
from calpicker.granularity import Granularity, GranularityNavigator
from calpicker.options import parse_options, parse_ranges
from calpicker.ranges import IntervalSet
from calpicker.selection import SelectionState

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])


def _requires_alive(func: _F) -> _F:
    """Reject calls on a destroyed picker."""

    @wraps(func)
    def wrapper(self: "Datepicker", *args: Any, **kwargs: Any) -> Any:
        if self._destroyed:
            raise DatepickerError(
                f"Cannot call {func.__name__}() on a destroyed Datepicker"
            )
        return func(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class Datepicker:
    """Date, month or year picker bound to a calendar, an input and a time widget.

    Attributes:
        show_always: The picker is permanently open
        auto_close: Close after a value is picked from the calendar
    """

    def __init__(
        self,
        calendar: Calendar,
        /,
        options: Mapping[str, Any] | None = None,
        *,
        date_input: DateInput | None = None,
        time_picker: TimePicker | None = None,
        document: Document | None = None,
        clock: Callable[[], int] = now_timestamp,
        **overrides: Any,
    ) -> None:
        """Build a picker.

        Args:
            calendar: Renderer for the calendar grid
            options: Option mapping (see ``DatepickerOptions``)
            date_input: Text input bound to the picker
            time_picker: Hour/minute widget; None for date-only pickers
            document: Source of global interactions for outside-click dismissal
            clock: Returns "now" in epoch milliseconds
            **overrides: Options given as keywords, merged over ``options``

        Raises:
            ConfigurationError: If the options are malformed
        """
        self._options = parse_options(options, **overrides)
        self._zone = self._options.zone
        self._calendar: Calendar = calendar
        self._time_picker: TimePicker | None = time_picker
        self._input: DateInput | None = None
        self._document: Document | None = document
        self._clock: Callable[[], int] = clock

        self._events = EventEmitter()
        self._selection = SelectionState(IntervalSet(), self._options.type, self._zone)
        self._navigator = GranularityNavigator(self._options.type)

        self._openers: list[Opener] = []
        self._opener_subscriptions: dict[int, Subscription] = {}
        self._input_subscriptions: list[Subscription] = []
        self._subscriptions: list[Subscription] = []
        self._document_subscription: Subscription | None = None

        self._opened = False
        self._enabled = True
        self._destroyed = False

        self.show_always: bool = self._options.show_always
        self.auto_close: bool = self._options.auto_close

        self._calendar.configure(
            {
                **self._options.calendar,
                "language": self._options.language,
                "type": self._options.type,
                "locale_text": self._options.locale_text,
                "tz": self._options.tz,
            }
        )
        self._subscriptions.append(self._calendar.on("draw", self._on_draw_calendar))
        if self._time_picker is not None:
            self._subscriptions.append(
                self._time_picker.on("change", self._on_change_time)
            )

        self.set_ranges(self._options.selectable_ranges)
        self.set_input(date_input)
        self.set_date_format(self._options.input_format)
        self.set_date(self._options.date)

        for opener in self._options.openers:
            self.add_opener(opener)

        if self.show_always:
            self.open()
        else:
            self._calendar.set_visible(False)

    # -- notifications ---------------------------------------------------

    def on(self, name: str, handler: Handler) -> Subscription:
        """Subscribe to ``change``, ``open``, ``close`` or ``error``."""
        return self._events.on(name, handler)

    # -- queries ---------------------------------------------------------

    @property
    def granularity(self) -> Granularity:
        """Granularity values are committed at."""
        return self._navigator.target

    @property
    def calendar_granularity(self) -> Granularity:
        """Granularity currently displayed by the calendar."""
        return self._navigator.active

    @property
    def language(self) -> str:
        return self._options.language

    @property
    def is_opened(self) -> bool:
        return self._opened

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def timestamp(self) -> int | None:
        return self._selection.value

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def time_picker(self) -> TimePicker | None:
        return self._time_picker

    @property
    def ranges(self) -> list[tuple[int, int]]:
        """Canonical selectable ranges as (start, end) millisecond pairs."""
        return self._selection.ranges.to_pairs()

    def get_date(self) -> datetime | None:
        return self._selection.value_datetime

    def is_selectable(self, value: DateLike, granularity: Granularity | None = None) -> bool:
        """Whether ``value`` can be picked at ``granularity``.

        Defaults to the granularity on display, so a month cell counts as
        selectable when any instant of that month is in range.
        """
        ts = to_timestamp(value, self._zone)
        return self._selection.is_selectable(ts, granularity or self._navigator.active)

    def is_selected(self, value: DateLike, granularity: Granularity | None = None) -> bool:
        ts = to_timestamp(value, self._zone)
        return self._selection.is_selected(ts, granularity or self._navigator.active)

    # -- value -----------------------------------------------------------

    @_requires_alive
    def set_date(self, value: DateLike) -> bool:
        """Commit ``value``, or clear the picker when it is None.

        Unselectable or unchanged values are ignored. Returns True if the
        value changed.
        """
        if value is None:
            return self.set_null()

        ts = to_timestamp(value, self._zone)
        if not self._selection.commit(ts):
            return False

        new_date = from_timestamp(ts, self._zone)
        logger.debug("committed %s", new_date.isoformat())
        self._sync_to_input()
        self._navigator.anchor = ts
        self._calendar.draw(date=new_date)
        if self._time_picker is not None:
            self._time_picker.set_time(new_date.hour, new_date.minute)

        self._events.fire("change")
        return True

    @_requires_alive
    def set_null(self) -> bool:
        """Clear the value. Returns True if there was one."""
        changed = self._selection.clear()

        if self._input is not None:
            self._input.clear_text()
        if self._time_picker is not None:
            self._time_picker.set_time(0, 0)
        self._calendar.draw()

        if changed:
            logger.debug("cleared value")
            self._events.fire("change")
        return changed

    # -- ranges ----------------------------------------------------------

    @_requires_alive
    def set_ranges(self, ranges: Sequence[Sequence[DateLike]]) -> None:
        """Replace every selectable range.

        Raises:
            ConfigurationError: If ``ranges`` is not a list of pairs
        """
        pairs = [
            (self._coerce(start), self._coerce(end))
            for start, end in parse_ranges(ranges)
        ]
        self._selection.ranges = IntervalSet(pairs)
        logger.debug("ranges set to %r", self._selection.ranges)
        self._refresh_from_ranges()

    @_requires_alive
    def add_range(self, start: DateLike, end: DateLike) -> None:
        self._selection.ranges.add(self._coerce(start), self._coerce(end))
        self._refresh_from_ranges()

    @_requires_alive
    def remove_range(self, start: DateLike, end: DateLike) -> None:
        self._selection.ranges.subtract(self._coerce(start), self._coerce(end))
        self._refresh_from_ranges()

    def _coerce(self, value: DateLike) -> int:
        ts = to_timestamp(value, self._zone)
        if ts is None:
            raise TypeError("Range bounds cannot be None")
        return ts

    def _refresh_from_ranges(self) -> None:
        value = self._selection.value
        if value is None or not self._selection.is_selectable(value):
            self.set_null()
        else:
            self._calendar.draw()

    # -- calendar navigation ---------------------------------------------

    @_requires_alive
    def on_cell_activated(self, value: DateLike) -> bool:
        """Handle a click on a calendar cell.

        Below the target granularity the click drills down one level.
        At the target it commits, keeping the time of day from the time
        widget (or from the previous value), then auto-closes if configured.
        Returns True if the value changed.
        """
        ts = to_timestamp(value, self._zone)
        if ts is None or not self._selection.is_selectable(ts, self._navigator.active):
            return False

        if not self._navigator.at_target:
            self.draw_lower_calendar(ts)
            return False

        previous = self._selection.value
        if self._time_picker is not None:
            ts = with_time(
                ts, self._time_picker.get_hour(), self._time_picker.get_minute(), self._zone
            )
        elif previous is not None:
            prev_date = from_timestamp(previous, self._zone)
            ts = with_time(ts, prev_date.hour, prev_date.minute, self._zone)

        changed = self.set_date(ts)
        if not self.show_always and self.auto_close:
            self.close()
        return changed

    @_requires_alive
    def on_title_activated(self) -> None:
        """Handle a click on the calendar title: zoom out one level."""
        self.draw_upper_calendar(self._calendar.get_date())

    @_requires_alive
    def draw_upper_calendar(self, value: DateLike = None) -> None:
        """Raise the calendar granularity: DATE → MONTH → YEAR."""
        ts = self._anchor_for(value)
        if self._navigator.drill_up(ts):
            self._calendar.draw(
                date=from_timestamp(ts, self._zone), granularity=self._navigator.active
            )

    @_requires_alive
    def draw_lower_calendar(self, value: DateLike = None) -> None:
        """Lower the calendar granularity: YEAR → MONTH → DATE, down to the target."""
        ts = self._anchor_for(value)
        self._navigator.drill_down(ts)
        self._calendar.draw(
            date=from_timestamp(ts, self._zone), granularity=self._navigator.active
        )

    def _anchor_for(self, value: DateLike) -> int:
        ts = to_timestamp(value, self._zone)
        if ts is None:
            ts = self._selection.value
        if ts is None:
            ts = self._navigator.anchor
        if ts is None:
            ts = self._clock()
        return ts

    # -- visibility ------------------------------------------------------

    @_requires_alive
    def open(self) -> None:
        """Show the picker, anchored at the value (or now) and at the target granularity."""
        if self._opened or not self._enabled:
            return

        anchor = self._selection.value
        if anchor is None:
            anchor = self._clock()
        self._navigator.reset(anchor)
        self._calendar.draw(
            date=from_timestamp(anchor, self._zone), granularity=self._navigator.active
        )
        self._calendar.set_visible(True)
        self._opened = True

        if not self.show_always and self._document is not None:
            self._document_subscription = self._document.listen(
                self._on_document_interaction
            )

        logger.debug("opened")
        self._events.fire("open")

    @_requires_alive
    def close(self) -> None:
        if self.show_always:
            return
        self._hide()

    def _hide(self) -> None:
        if not self._opened:
            return

        self._release_document_listener()
        self._calendar.set_visible(False)
        self._opened = False

        logger.debug("closed")
        self._events.fire("close")

    @_requires_alive
    def toggle(self) -> None:
        if self._opened:
            self.close()
        else:
            self.open()

    def _release_document_listener(self) -> None:
        if self._document_subscription is not None:
            self._document_subscription.release()
            self._document_subscription = None

    def _on_document_interaction(self, target: object) -> None:
        inside = (
            self._calendar.contains(target)
            or (self._input is not None and self._input.contains(target))
            or any(opener.contains(target) for opener in self._openers)
        )
        if not (self.show_always or inside):
            self.close()

    # -- openers ---------------------------------------------------------

    @_requires_alive
    def add_opener(self, opener: Opener) -> None:
        if any(existing is opener for existing in self._openers):
            return
        self._openers.append(opener)
        if self._enabled:
            self._bind_opener(opener)
        else:
            opener.set_disabled(True)

    @_requires_alive
    def remove_opener(self, opener: Opener) -> None:
        for idx, existing in enumerate(self._openers):
            if existing is opener:
                self._unbind_opener(opener)
                del self._openers[idx]
                return

    @_requires_alive
    def remove_all_openers(self) -> None:
        for opener in self._openers:
            self._unbind_opener(opener)
        self._openers = []

    def _bind_opener(self, opener: Opener) -> None:
        self._opener_subscriptions[id(opener)] = opener.bind(self.toggle)

    def _unbind_opener(self, opener: Opener) -> None:
        subscription = self._opener_subscriptions.pop(id(opener), None)
        if subscription is not None:
            subscription.release()

    # -- input -----------------------------------------------------------

    @_requires_alive
    def set_input(self, input: DateInput | None) -> None:
        """Bind a text input, carrying over the previous input's format."""
        previous = self._input
        prev_format = None
        if previous is not None:
            prev_format = previous.get_format()
            for subscription in self._input_subscriptions:
                subscription.release()
            self._input_subscriptions = []
            previous.destroy()

        self._input = input
        if input is None:
            return

        if prev_format is not None:
            input.set_format(prev_format)
        self._input_subscriptions = [
            input.on("changed", self._on_change_input),
            input.on("activated", self.open),
        ]
        if not self._enabled:
            input.disable()
        self._sync_to_input()

    @_requires_alive
    def set_date_format(self, fmt: str | None) -> None:
        if self._input is None:
            return
        self._input.set_format(fmt)
        self._sync_to_input()

    def _sync_to_input(self) -> None:
        if self._input is None:
            return
        value = self._selection.value_datetime
        if value is None:
            self._input.clear_text()
        else:
            self._input.set_date(value)

    def _on_change_input(self) -> None:
        assert self._input is not None
        try:
            parsed = self._input.get_date()
        except ParsingError as exc:
            logger.warning("could not parse input text: %s", exc)
            self._events.fire("error", ErrorEvent(kind="ParsingError", message=str(exc)))
            self._sync_to_input()
            return

        ts = to_timestamp(parsed, self._zone)
        if not self._selection.is_selectable(ts):
            self._sync_to_input()
            return

        if self._time_picker is not None:
            self._time_picker.set_time(parsed.hour, parsed.minute)
        if not self.set_date(ts):
            self._sync_to_input()

    def _on_change_time(self, change: TimeChange) -> None:
        value = self._selection.value
        if value is not None:
            self.set_date(with_time(value, change.hour, change.minute, self._zone))

    # -- rendering -------------------------------------------------------

    def _on_draw_calendar(self, cells: Sequence[int]) -> None:
        active = self._navigator.active
        today = start_of_day(self._clock(), self._zone)

        states: list[CellState] = []
        for ts in cells:
            selectable = self._selection.is_selectable(ts, active)
            states.append(
                CellState(
                    timestamp=ts,
                    selectable=selectable,
                    selected=selectable and self._selection.is_selected(ts, active),
                    today=(
                        active is Granularity.DATE
                        and is_valid_timestamp(ts, self._zone)
                        and start_of_day(ts, self._zone) == today
                    ),
                )
            )

        self._calendar.decorate(
            DrawDecoration(cells=tuple(states), hidden_buttons=self._useless_buttons())
        )

    def _useless_buttons(self) -> frozenset[NavButton]:
        """Navigation buttons that would only lead outside every range."""
        ranges = self._selection.ranges
        try:
            minimum = ranges.get_minimum()
            maximum = ranges.get_maximum()
        except EmptySetError:
            return frozenset(NavButton)

        zone = self._zone
        hidden: set[NavButton] = set()
        year_unit = Granularity.YEAR

        if self._navigator.active is Granularity.DATE:
            year_unit = Granularity.MONTH
            next_month = self._coerce(self._calendar.get_next_date())
            prev_month = self._coerce(self._calendar.get_prev_date())
            if maximum < period_edge(next_month, Granularity.MONTH, zone, "start"):
                hidden.add(NavButton.NEXT_MONTH)
            if minimum > period_edge(prev_month, Granularity.MONTH, zone, "end"):
                hidden.add(NavButton.PREV_MONTH)

        next_year = self._coerce(self._calendar.get_next_year_date())
        prev_year = self._coerce(self._calendar.get_prev_year_date())
        if maximum < period_edge(next_year, year_unit, zone, "start"):
            hidden.add(NavButton.NEXT_YEAR)
        if minimum > period_edge(prev_year, year_unit, zone, "end"):
            hidden.add(NavButton.PREV_YEAR)

        return frozenset(hidden)

    # -- lifecycle -------------------------------------------------------

    @_requires_alive
    def enable(self) -> None:
        if self._enabled:
            return
        self._enabled = True
        if self._input is not None:
            self._input.enable()
        for opener in self._openers:
            opener.set_disabled(False)
            self._bind_opener(opener)
        logger.debug("enabled")
        if self.show_always:
            self.open()

    @_requires_alive
    def disable(self) -> None:
        if not self._enabled:
            return
        self._hide()
        self._enabled = False
        if self._input is not None:
            self._input.disable()
        for opener in self._openers:
            self._unbind_opener(opener)
            opener.set_disabled(True)
        logger.debug("disabled")

    @_requires_alive
    def destroy(self) -> None:
        """Release every listener and collaborator. The picker is unusable afterwards."""
        self._release_document_listener()
        for subscription in self._subscriptions + self._input_subscriptions:
            subscription.release()
        self._subscriptions = []
        self._input_subscriptions = []
        self.remove_all_openers()

        self._calendar.destroy()
        if self._time_picker is not None:
            self._time_picker.destroy()
        if self._input is not None:
            self._input.destroy()

        self._events.clear()
        self._input = None
        self._time_picker = None
        self._opened = False
        self._destroyed = True
