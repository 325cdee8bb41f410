from .collaborators import (
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
from .datepicker import Datepicker
from .errors import ConfigurationError, DatepickerError, EmptySetError, ParsingError
from .events import EventEmitter, Subscription
from .granularity import Granularity, GranularityNavigator
from .interval import Interval
from .locale import LOCALE_TEXTS, register_locale
from .options import DatepickerOptions, parse_options
from .ranges import IntervalSet
from .selection import SelectionState

__all__ = [
    "Datepicker",
    "DatepickerOptions",
    "parse_options",
    "Interval",
    "IntervalSet",
    "SelectionState",
    "Granularity",
    "GranularityNavigator",
    "EventEmitter",
    "Subscription",
    "Calendar",
    "TimePicker",
    "DateInput",
    "Opener",
    "Document",
    "CellState",
    "DrawDecoration",
    "NavButton",
    "TimeChange",
    "ErrorEvent",
    "LOCALE_TEXTS",
    "register_locale",
    "DatepickerError",
    "ConfigurationError",
    "ParsingError",
    "EmptySetError",
]
