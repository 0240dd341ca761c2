"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ABSENCE_THRESHOLD = 3
DEFAULT_BAN_DURATION_MONTHS = 6
DEFAULT_LIST_LIMIT = 500
