from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.fingerprint_attendance.fingerprint_attendance.employees.model import Employee
from tests.fakes import InMemoryAttendance, InMemoryEmployees, make_service

# March 2025: the 1st is a Saturday, the 7th a Friday.
TODAY = date(2025, 3, 31)


@pytest.fixture
def employee() -> Employee:
    return Employee(code="E1", full_name="Mona Adel", work_days_per_week=6, base_salary=Decimal("6000"))


@pytest.fixture
def employees(employee) -> InMemoryEmployees:
    return InMemoryEmployees(employee)


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def service(attendance, employees):
    return make_service(attendance, employees, TODAY)
