"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_DEBOUNCE_SECONDS = 30
DEFAULT_MIN_MATCH_CONFIDENCE = 0.4
DEFAULT_STORAGE_KEY = "facial-attendance-records"
DEFAULT_RECENT_LIMIT = 50

UNKNOWN_IDENTITY = "unknown"

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.6
