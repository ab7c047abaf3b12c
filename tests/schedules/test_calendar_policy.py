from datetime import date

import pytest

from src.fingerprint_attendance.fingerprint_attendance.core.exceptions import ValidationError
from src.fingerprint_attendance.fingerprint_attendance.schedules.policy import (
    count_weekly_off_days,
    count_work_days,
    is_weekly_off,
)

FRIDAY = date(2025, 3, 7)
SATURDAY = date(2025, 3, 8)
SUNDAY = date(2025, 3, 2)


def test_six_day_week_is_off_on_friday_only():
    assert is_weekly_off(FRIDAY, 6) is True
    assert is_weekly_off(SATURDAY, 6) is False
    assert is_weekly_off(SUNDAY, 6) is False


def test_five_day_week_is_off_on_friday_and_saturday():
    assert is_weekly_off(FRIDAY, 5) is True
    assert is_weekly_off(SATURDAY, 5) is True
    assert is_weekly_off(SUNDAY, 5) is False


def test_unsupported_week_length_is_rejected():
    with pytest.raises(ValidationError):
        is_weekly_off(SUNDAY, 4)


def test_counts_over_march_2025():
    start, end = date(2025, 3, 1), date(2025, 3, 31)
    # Fridays: 7, 14, 21, 28. Saturdays: 1, 8, 15, 22, 29.
    assert count_weekly_off_days(start, end, 6) == 4
    assert count_weekly_off_days(start, end, 5) == 9
    assert count_work_days(start, end, 6) == 27
    assert count_work_days(start, end, 5) == 22
