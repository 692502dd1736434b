"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_WORKING_HOURS = 8
DEFAULT_LOCAL_TIMEZONE = "Asia/Kolkata"
DEFAULT_NOTIFICATION_WORKERS = 4

# Padding around a month when loading worked/leave dates, so the Friday and
# Monday of a weekend straddling the month boundary are known.
WEEKEND_PADDING_DAYS = 2

SATURDAY = 5
SUNDAY = 6

# MySQL ER_NO_SUCH_TABLE
MYSQL_NO_SUCH_TABLE = 1146
