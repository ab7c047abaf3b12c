from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from src.fingerprint_attendance.fingerprint_attendance.attendance.leave_batch import LeaveBatchService
from src.fingerprint_attendance.fingerprint_attendance.attendance.model import DayUpdate
from src.fingerprint_attendance.fingerprint_attendance.core.enums import DayState, LeaveKind
from src.fingerprint_attendance.fingerprint_attendance.core.exceptions import InsufficientLeaveBalance, ValidationError
from tests.conftest import TODAY
from tests.fakes import InMemoryEmployees, at, make_service

SUNDAY = date(2025, 3, 2)
MONDAY = date(2025, 3, 3)
TUESDAY = date(2025, 3, 4)
FRIDAY = date(2025, 3, 7)
SATURDAY = date(2025, 3, 8)


@pytest.fixture
def batch(service, employees):
    return LeaveBatchService(service, employees)


def _two_employees(attendance, employee, **second):
    employees = InMemoryEmployees(employee, replace(employee, code="E2", full_name="Karim Samir", **second))
    service = make_service(attendance, employees, TODAY)
    return LeaveBatchService(service, employees), service, employees


def test_annual_leave_skips_weekly_off_and_charges_each_day(batch, service, employees):
    result = batch.apply(LeaveKind.ANNUAL, SUNDAY, SATURDAY, employee_code="E1")

    assert result.applied == 6
    assert employees.get_by_code("E1").annual_leave_balance == 15
    assert service.get_day("E1", FRIDAY) is None
    assert {r.state for r in service.list_days("E1", SUNDAY, SATURDAY)} == {DayState.ANNUAL_LEAVE}


def test_annual_leave_reapplied_is_not_charged_twice(batch, employees):
    batch.apply(LeaveKind.ANNUAL, SUNDAY, TUESDAY, employee_code="E1")
    batch.apply(LeaveKind.ANNUAL, SUNDAY, TUESDAY, employee_code="E1")

    assert employees.get_by_code("E1").annual_leave_balance == 18


def test_annual_leave_beyond_balance_writes_nothing(attendance, employee):
    employees = InMemoryEmployees(replace(employee, annual_leave_balance=2))
    batch = LeaveBatchService(make_service(attendance, employees, TODAY), employees)

    with pytest.raises(InsufficientLeaveBalance):
        batch.apply(LeaveKind.ANNUAL, SUNDAY, TUESDAY, employee_code="E1")

    assert attendance.all() == []
    assert employees.get_by_code("E1").annual_leave_balance == 2


def test_leave_drops_recorded_punches(batch, service):
    service.save_day(DayUpdate("E1", MONDAY, check_in=at(MONDAY, 8, 0), check_out=at(MONDAY, 17, 30)))

    batch.apply("medical", MONDAY, MONDAY, employee_code="E1")

    monday = service.get_day("E1", MONDAY)
    assert monday.state == DayState.MEDICAL_LEAVE
    assert monday.check_in is None
    assert monday.work_hours == 0


def test_leave_compensation_skips_days_on_leave_and_employees_without_salary(attendance, employee):
    batch, service, _ = _two_employees(attendance, employee, base_salary=Decimal("0"))
    service.save_day(DayUpdate("E1", MONDAY, medical_leave=True))

    result = batch.apply(LeaveKind.LEAVE_COMPENSATION, SUNDAY, TUESDAY)

    assert (result.applied, result.skipped, result.errors) == (2, 4, {})
    assert service.get_day("E1", SUNDAY).leave_compensation == Decimal("400.00")
    assert service.get_day("E1", MONDAY).state == DayState.MEDICAL_LEAVE
    assert service.list_days("E2", SUNDAY, TUESDAY) == []


def test_appropriate_value_requires_positive_amount(batch):
    with pytest.raises(ValidationError):
        batch.apply(LeaveKind.APPROPRIATE_VALUE, SUNDAY, MONDAY, employee_code="E1", amount=0)


def test_appropriate_value_sets_amount_on_each_day(batch, service):
    result = batch.apply(LeaveKind.APPROPRIATE_VALUE, SUNDAY, MONDAY, employee_code="E1", amount="75.5")

    assert result.applied == 2
    days = service.list_days("E1", SUNDAY, MONDAY)
    assert [(r.state, r.appropriate_value, r.appropriate_value_days) for r in days] == [
        (DayState.APPROPRIATE_VALUE, Decimal("75.50"), 1),
        (DayState.APPROPRIATE_VALUE, Decimal("75.50"), 1),
    ]


def test_official_leave_counter_moves_once_per_day(batch, employees):
    batch.apply("official", SUNDAY, TUESDAY, employee_code="E1")
    batch.apply("official", SUNDAY, TUESDAY, employee_code="E1")

    assert employees.get_by_code("E1").total_official_leave_days == 3


def test_all_employee_batch_collects_errors(attendance, employee):
    batch, service, employees = _two_employees(attendance, employee, annual_leave_balance=0)

    result = batch.apply(LeaveKind.ANNUAL, MONDAY, MONDAY)

    assert result.applied == 1
    assert list(result.errors) == ["E2"]
    assert service.get_day("E1", MONDAY).state == DayState.ANNUAL_LEAVE
    assert service.get_day("E2", MONDAY) is None
    assert employees.get_by_code("E2").annual_leave_balance == 0


def test_unknown_kind_and_future_range_are_rejected(batch):
    with pytest.raises(ValidationError):
        batch.apply("holiday", SUNDAY, MONDAY)
    with pytest.raises(ValidationError):
        batch.apply(LeaveKind.MEDICAL, SUNDAY, date(2025, 4, 2))
    with pytest.raises(ValidationError):
        batch.apply(LeaveKind.MEDICAL, MONDAY, SUNDAY)
