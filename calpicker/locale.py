"""Locale text tables selected by a picker's ``language`` option."""

from typing import Any

from calpicker.errors import ConfigurationError

DEFAULT_LANGUAGE = "en"

LOCALE_TEXTS: dict[str, dict[str, Any]] = {
    "en": {
        "titles": {
            "DD": ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
            "D": ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"],
            "MMMM": [
                "January", "February", "March", "April", "May", "June",
                "July", "August", "September", "October", "November", "December",
            ],
            "MMM": ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
        },
        "title_format": "{month_short} {year}",
    },
    "ko": {
        "titles": {
            "DD": ["일요일", "월요일", "화요일", "수요일", "목요일", "금요일", "토요일"],
            "D": ["일", "월", "화", "수", "목", "금", "토"],
            "MMMM": [
                "1월", "2월", "3월", "4월", "5월", "6월",
                "7월", "8월", "9월", "10월", "11월", "12월",
            ],
            "MMM": [
                "1월", "2월", "3월", "4월", "5월", "6월",
                "7월", "8월", "9월", "10월", "11월", "12월",
            ],
        },
        "title_format": "{year}.{month_num:02d}",
    },
}


def get_locale_text(language: str) -> dict[str, Any]:
    """Look up a locale table.

    Raises:
        ConfigurationError: If no table is registered under ``language``
    """
    try:
        return LOCALE_TEXTS[language]
    except KeyError:
        valid = ", ".join(sorted(LOCALE_TEXTS))
        raise ConfigurationError(
            f"Unknown language {language!r}.\n"
            f"Registered languages: {valid}\n"
            f"Hint: add one with calpicker.register_locale({language!r}, texts)"
        ) from None


def register_locale(language: str, texts: dict[str, Any]) -> None:
    """Add or replace a locale table; it must provide the same keys as 'en'."""
    missing = set(LOCALE_TEXTS[DEFAULT_LANGUAGE]) - set(texts)
    if missing:
        raise ConfigurationError(
            f"Locale {language!r} is missing keys: {', '.join(sorted(missing))}"
        )
    LOCALE_TEXTS[language] = texts
