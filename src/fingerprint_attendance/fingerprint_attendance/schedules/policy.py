"""Weekly off-day calendar.

A 5-day week is off on Friday and Saturday, a 6-day week on Friday only.
Pure functions of the local calendar weekday.
"""

from __future__ import annotations

from datetime import date

from ..common.datetime_utils import iter_days
from ..core.exceptions import ValidationError

FRIDAY = 4
SATURDAY = 5

WEEKLY_OFF_DAYS = {
    5: frozenset({FRIDAY, SATURDAY}),
    6: frozenset({FRIDAY}),
}


def is_weekly_off(day: date, work_days_per_week: int) -> bool:
    try:
        off_days = WEEKLY_OFF_DAYS[int(work_days_per_week)]
    except (KeyError, TypeError, ValueError):
        raise ValidationError(f"Unsupported work days per week: {work_days_per_week!r}")
    return day.weekday() in off_days


def count_weekly_off_days(start: date, end: date, work_days_per_week: int) -> int:
    return sum(1 for d in iter_days(start, end) if is_weekly_off(d, work_days_per_week))


def count_work_days(start: date, end: date, work_days_per_week: int) -> int:
    return sum(1 for d in iter_days(start, end) if not is_weekly_off(d, work_days_per_week))
