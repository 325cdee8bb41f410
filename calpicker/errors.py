"""Exception taxonomy for calpicker.

``ConfigurationError`` is raised while building a picker and is never caught
internally. ``ParsingError`` comes from an input adapter and is converted into
an ``error`` notification by the picker. ``EmptySetError`` signals a min/max
query against an interval set with nothing left in it.
"""


class DatepickerError(Exception):
    """Base class for every error raised by calpicker."""


class ConfigurationError(DatepickerError, ValueError):
    """Malformed options passed to a picker at construction time."""


class ParsingError(DatepickerError, ValueError):
    """Date text that could not be parsed by an input adapter."""


class EmptySetError(DatepickerError, LookupError):
    """Minimum or maximum requested from an interval set with no intervals."""
