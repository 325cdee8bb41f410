"""Shared constants for calpicker.

Timestamps throughout the API are integer milliseconds since the Unix epoch.
"""

DEFAULT_TZ = "UTC"

# Default selectable bounds: 1900-01-01T00:00:00Z and 2999-12-31T00:00:00Z
MIN_DATE = -2208988800000
MAX_DATE = 32503593600000
