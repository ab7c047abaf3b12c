from dataclasses import replace
from datetime import date

from src.fingerprint_attendance.fingerprint_attendance.attendance.model import DayUpdate
from src.fingerprint_attendance.fingerprint_attendance.attendance.monthly_reset import MonthlyResetJob
from src.fingerprint_attendance.fingerprint_attendance.core.enums import DayState
from tests.conftest import TODAY
from tests.fakes import InMemoryEmployees, at, make_service

MARCH = date(2025, 3, 1)
FEBRUARY = date(2025, 2, 1)


def _job(attendance, *employees):
    directory = InMemoryEmployees(*employees)
    service = make_service(attendance, directory, TODAY)
    return MonthlyResetJob(service, directory), service, directory


def test_reset_refills_allowance_and_backfills_previous_month(attendance, employee):
    job, service, employees = _job(
        attendance, replace(employee, remaining_late_allowance=30, late_allowance_period=FEBRUARY)
    )

    report = job.run(date(2025, 3, 1))

    assert (report.period, report.reset, report.backfilled, report.errors) == (MARCH, 1, 28, {})
    refreshed = employees.get_by_code("E1")
    assert (refreshed.remaining_late_allowance, refreshed.late_allowance_period) == (120, MARCH)

    february = service.list_days("E1", FEBRUARY, date(2025, 2, 28))
    states = [r.state for r in february]
    assert states.count(DayState.WEEKLY_OFF) == 4
    assert states.count(DayState.ABSENT) == 24


def test_reset_recharges_days_already_recorded_this_month(attendance, employee):
    job, service, employees = _job(attendance, employee)
    monday = date(2025, 3, 3)
    service.save_day(DayUpdate("E1", monday, check_in=at(monday, 9, 30), check_out=at(monday, 17, 30)))

    job.run()

    assert employees.get_by_code("E1").remaining_late_allowance == 60
    assert service.get_day("E1", monday).late_allowance_consumed == 60


def test_second_run_backfills_nothing(attendance, employee):
    job, _, _ = _job(attendance, employee)
    job.run(date(2025, 3, 1))

    report = job.run(date(2025, 3, 1))

    assert (report.reset, report.backfilled) == (1, 0)


def test_backfilled_month_does_not_touch_live_allowance(attendance, employee):
    job, service, employees = _job(attendance, employee)
    monday = date(2025, 3, 3)
    service.save_day(DayUpdate("E1", monday, check_in=at(monday, 10, 0), check_out=at(monday, 17, 30)))

    job.run()

    assert employees.get_by_code("E1").remaining_late_allowance == 30
