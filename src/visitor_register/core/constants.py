"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 1
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_REPORT_DAYS = 30
DASHBOARD_RECENT_LIMIT = 5
DASHBOARD_TOP_RELATIONSHIPS = 5

NOTES_DELIMITER = " | "
CANCELLATION_MARKER = "[CANCELADO: {timestamp}]"
CANCELLATION_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"
