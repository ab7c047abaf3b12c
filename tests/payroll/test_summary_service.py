from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from src.fingerprint_attendance.fingerprint_attendance.attendance.model import DayUpdate
from src.fingerprint_attendance.fingerprint_attendance.core.exceptions import ValidationError
from src.fingerprint_attendance.fingerprint_attendance.payroll.service import AttendanceSummaryService
from tests.conftest import TODAY
from tests.fakes import InMemoryEmployees, at, make_service

SUNDAY = date(2025, 3, 2)
MONDAY = date(2025, 3, 3)
SATURDAY = date(2025, 3, 8)


@pytest.fixture
def week(attendance, employee):
    employees = InMemoryEmployees(employee, replace(employee, code="E2", full_name="Karim Samir"))
    service = make_service(attendance, employees, TODAY)

    service.save_day(DayUpdate("E1", SUNDAY, check_in=at(SUNDAY, 8, 20), check_out=at(SUNDAY, 17, 30)))
    service.save_day(DayUpdate("E1", MONDAY, check_in=at(MONDAY, 9, 30), check_out=at(MONDAY, 16, 0)))
    service.save_day(DayUpdate("E1", date(2025, 3, 4), annual_leave=True))
    service.save_day(DayUpdate("E1", date(2025, 3, 5), medical_leave=True))
    service.save_day(DayUpdate("E1", date(2025, 3, 6), leave_compensation=Decimal("400")))
    service.save_day(DayUpdate("E2", MONDAY, check_in=at(MONDAY, 8, 0)))
    service.backfill_missing_days(SUNDAY, SATURDAY, employee_code="E1")
    return AttendanceSummaryService(attendance)


def test_summary_totals_one_week(week):
    (summary,) = week.build(SUNDAY, SATURDAY, employee_code="E1")

    assert summary.employee_name == "Mona Adel"
    assert summary.work_days == 2
    assert (summary.absences, summary.weekly_off_days) == (1, 1)
    assert (summary.annual_leave_days, summary.medical_leave_days, summary.leave_compensation_days) == (1, 1, 1)
    assert summary.total_leave_days == 3
    assert summary.leave_compensation_total == Decimal("400.00")
    assert summary.total_work_hours == 24.67
    assert summary.total_overtime == 0.17
    assert summary.late_deduction_days == 0
    assert summary.early_leave_deduction_days == 1.5
    assert summary.medical_deduction_days == 0.25
    assert summary.total_deduction_days == 1.75


def test_summary_covers_every_employee_in_range(week):
    summaries = week.build(SUNDAY, SATURDAY)

    assert [s.employee_code for s in summaries] == ["E1", "E2"]
    e2 = summaries[1]
    assert (e2.work_days, e2.single_punch_days, e2.total_work_hours) == (1, 1, 9.0)


def test_summary_as_dict_is_json_ready(week):
    data = week.build(SUNDAY, SUNDAY, employee_code="E1")[0].as_dict()

    assert data["start"] == "2025-03-02"
    assert data["leave_compensation_total"] == "0.00"
    assert data["total_deduction_days"] == 0


def test_summary_of_empty_range_and_bad_range(week):
    assert week.build(date(2025, 2, 1), date(2025, 2, 28)) == []
    with pytest.raises(ValidationError):
        week.build(SATURDAY, SUNDAY)
