"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_NOTIFICATION_LIMIT = 50

MEDICAL_LEAVE_DAYS = (3, 4)
MEDICAL_LEAVE_LOOKBACK_DAYS = 7
MATERNITY_LEAVE_DAYS = 90
PATERNITY_LEAVE_DAYS = 7
MAX_PARENTAL_CLAIMS = 2
MIN_OT_HOURS = 1
MAX_OT_HOURS = 24
MAX_CONSECUTIVE_PAID_LEAVE_DAYS = 3
MIN_COMPENSATORY_OT_HOURS = 4
FULL_DAY_COMPENSATORY_HOURS = 8
HALF_DAY_COMPENSATORY_HOURS = 4
