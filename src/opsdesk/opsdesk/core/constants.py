"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_BUSINESS_TIMEZONE = "Asia/Kolkata"
DEFAULT_HALF_DAY_THRESHOLD_HOURS = 4
DEFAULT_CHECKIN_START_HOUR = 10
DEFAULT_CHECKIN_END_HOUR = 18
MONTHLY_PAID_LEAVE_CREDIT = 1
DEFAULT_HISTORY_LIMIT = 31
