"""Picker options: defaults, validation and normalization.

Options are validated once, eagerly, when a picker is built. Anything
malformed raises ``ConfigurationError`` and aborts construction.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from calpicker.collaborators import Opener
from calpicker.dates import DateLike
from calpicker.errors import ConfigurationError
from calpicker.granularity import Granularity
from calpicker.locale import DEFAULT_LANGUAGE, get_locale_text
from calpicker.util import DEFAULT_TZ, MAX_DATE, MIN_DATE

DEFAULT_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True, kw_only=True)
class DatepickerOptions:
    """Validated picker configuration.

    Attributes:
        language: Locale table key
        type: Granularity values are committed at
        date: Initial value (ignored if not selectable)
        show_always: Never close and never listen for outside clicks
        auto_close: Close after a value is picked from the calendar
        selectable_ranges: (start, end) pairs; endpoints may be dates,
            datetimes or epoch milliseconds
        calendar: Option block handed to the calendar renderer
        input: Option block for the text input (``format``)
        openers: Controls that toggle the picker
        tz: IANA timezone in which calendar periods are computed
    """

    language: str = DEFAULT_LANGUAGE
    type: Granularity = Granularity.DATE
    date: DateLike = None
    show_always: bool = False
    auto_close: bool = True
    selectable_ranges: tuple[tuple[DateLike, DateLike], ...] = ((MIN_DATE, MAX_DATE),)
    calendar: Mapping[str, Any] = field(default_factory=dict)
    input: Mapping[str, Any] = field(default_factory=lambda: {"format": None})
    openers: tuple[Opener, ...] = ()
    tz: str = DEFAULT_TZ

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.tz)

    @property
    def locale_text(self) -> dict[str, Any]:
        return get_locale_text(self.language)

    @property
    def input_format(self) -> str:
        return self.input.get("format") or DEFAULT_FORMAT


_KNOWN = frozenset(DatepickerOptions.__dataclass_fields__)


def parse_options(options: Mapping[str, Any] | None = None, **overrides: Any) -> DatepickerOptions:
    """Merge user options over the defaults and validate them.

    Raises:
        ConfigurationError: If any option is malformed
    """
    merged: dict[str, Any] = dict(options or {})
    merged.update(overrides)

    unknown = set(merged) - _KNOWN
    if unknown:
        raise ConfigurationError(
            f"Unknown option(s): {', '.join(sorted(unknown))}\n"
            f"Valid options: {', '.join(sorted(_KNOWN))}"
        )

    if "language" in merged:
        if not isinstance(merged["language"], str):
            raise ConfigurationError(f"language must be a string, got {merged['language']!r}")
        get_locale_text(merged["language"])

    if "type" in merged:
        try:
            merged["type"] = Granularity.parse(merged["type"])
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from None

    for flag in ("show_always", "auto_close"):
        if flag in merged and not isinstance(merged[flag], bool):
            raise ConfigurationError(f"{flag} must be a bool, got {merged[flag]!r}")

    for block in ("calendar", "input"):
        if block in merged:
            if not isinstance(merged[block], Mapping):
                raise ConfigurationError(
                    f"{block.capitalize()} option must be a mapping, "
                    f"got {type(merged[block]).__name__!r}"
                )
            merged[block] = dict(merged[block])

    if "input" in merged:
        fmt = merged["input"].get("format")
        if fmt is not None and not isinstance(fmt, str):
            raise ConfigurationError(f"Input format must be a string, got {fmt!r}")

    if "selectable_ranges" in merged:
        merged["selectable_ranges"] = parse_ranges(merged["selectable_ranges"])

    if "date" in merged and merged["date"] is not None:
        if not _is_date_like(merged["date"]):
            raise ConfigurationError(
                f"date must be a datetime, date or epoch milliseconds, got {merged['date']!r}"
            )

    if "openers" in merged:
        openers = merged["openers"]
        if isinstance(openers, (str, bytes)) or not isinstance(openers, Sequence):
            raise ConfigurationError(f"openers must be a list, got {openers!r}")
        merged["openers"] = tuple(openers)

    if "tz" in merged:
        try:
            ZoneInfo(merged["tz"])
        except (ZoneInfoNotFoundError, ValueError, TypeError):
            raise ConfigurationError(f"Unknown timezone {merged['tz']!r}") from None

    return DatepickerOptions(**merged)


def _is_date_like(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    return not isinstance(value, bool) and isinstance(value, (int, date))


def parse_ranges(ranges: Any) -> tuple[tuple[DateLike, DateLike], ...]:
    if isinstance(ranges, (str, bytes)) or not isinstance(ranges, Sequence):
        raise ConfigurationError(
            f"Selectable-ranges must be a list of (start, end) pairs.\n"
            f"Got {type(ranges).__name__!r}: {ranges!r}\n"
            f"Example: selectable_ranges=[(date(2015, 1, 1), date(2015, 1, 31))]"
        )
    parsed: list[tuple[DateLike, DateLike]] = []
    for pair in ranges:
        if (
            isinstance(pair, (str, bytes))
            or not isinstance(pair, Sequence)
            or len(pair) != 2
            or not all(_is_date_like(bound) for bound in pair)
        ):
            raise ConfigurationError(
                f"Each selectable range must be a (start, end) pair of dates, "
                f"datetimes or epoch milliseconds, got {pair!r}"
            )
        parsed.append((pair[0], pair[1]))
    return tuple(parsed)
