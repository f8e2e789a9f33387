"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_DAILY_MINUTES = 540
DEFAULT_WORK_DAYS = (1, 2, 3, 4, 5)  # 0=Sunday .. 6=Saturday
DEFAULT_OFFICE_RADIUS_METERS = 100
DEFAULT_LATE_AFTER = time(9, 30)
DEFAULT_REPORT_PAGE_SIZE = 25

HALF_DAY_LEAVE = "Half Day"
REGULARIZATION_LEAVE = "Regularization"
UNASSIGNED_DEPARTMENT = "Unassigned"

SETTING_LEAVE_RESET_DATE = "leave_reset_date"
SETTING_COMMON_INFO = "common_info"
SETTING_BIRTHDAY_ENABLED = "birthday_feature_enabled"

# Compliance violation score weights (higher score is worse).
SCORE_PER_ABSENCE = 3
SCORE_PER_MISSED_CHECKOUT = 1
SCORE_PER_LEAVE = 0.5
SCORE_PER_SHORTFALL_HOUR = 0.5
