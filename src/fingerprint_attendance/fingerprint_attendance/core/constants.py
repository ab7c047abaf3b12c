"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time
from decimal import Decimal

DEFAULT_TIMEZONE = "Africa/Cairo"

# Lateness / early-leave policy (local wall-clock times)
OFFICIAL_START = time(8, 30)
LATE_GRACE_END = time(9, 15)
HALF_DAY_LATE_AFTER = time(11, 0)
EARLY_LEAVE_HALF_DAY_UNTIL = time(16, 0)
EARLY_LEAVE_QUARTER_DAY_UNTIL = time(17, 15)

QUARTER_DAY = 0.25
HALF_DAY = 0.5
FULL_DAY = 1.0

MAX_DAILY_HOURS = 24

# Employee defaults
DEFAULT_WORK_DAYS_PER_WEEK = 6
DEFAULT_WORK_HOURS_PER_DAY = 9.0
DEFAULT_SHIFT_START = time(8, 30)
DEFAULT_SHIFT_END = time(17, 30)
DEFAULT_MONTHLY_LATE_ALLOWANCE = 120
DEFAULT_ANNUAL_LEAVE_BALANCE = 21
DEFAULT_MEDICAL_LEAVE_DEDUCTION = 0.25

# Leave compensation pays two days of a 30-day month.
LEAVE_COMPENSATION_MONTH_DAYS = Decimal("30")
LEAVE_COMPENSATION_DAYS = Decimal("2")

DEFAULT_BULK_WORKERS = 4
