"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_WEEKDAY_RATE = 200.0
DEFAULT_WEEKEND_RATE = 250.0
DEFAULT_ADMIN_PASSWORD = "1616"
DEFAULT_AUTO_REFRESH = True
DEFAULT_SESSION_MINUTES = 8 * 60

DATE_KEY_FORMAT = "%Y-%m-%d"
MONTH_KEY_FORMAT = "%Y-%m"
DISPLAY_DATE_FORMAT = "%d.%m.%Y"
DISPLAY_TIME_FORMAT = "%H:%M"

MANUAL_EDIT_NOTE = "Manually modified"

# Saturday and Sunday in datetime.weekday() numbering.
WEEKEND_DAYS = frozenset({5, 6})

# Key-value store keys.
PEOPLE_KEY = "attendance-users"
RECORDS_KEY_PREFIX = "attendance-records"
RATES_KEY = "attendance-rates"
ADMIN_SETTINGS_KEY = "attendance-admin-settings"
AUTO_REFRESH_KEY = "attendance-auto-refresh"
LAST_MANUAL_REFRESH_KEY = "attendance-last-manual-refresh"
