from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import PunchValue
from ..core.constants import DEFAULT_ANNUAL_LEAVE_BALANCE, DEFAULT_WORK_DAYS_PER_WEEK
from ..core.enums import DayState

ZERO = Decimal("0")


@dataclass(frozen=True)
class StatusSignals:
    """The six mutually exclusive statuses of a day."""

    absence: bool = False
    annual_leave: bool = False
    medical_leave: bool = False
    official_leave: bool = False
    leave_compensation: Decimal = ZERO
    appropriate_value: Decimal = ZERO


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee-day.

    Derived fields (hours, deductions, state, allowance consumed) are owned by
    the resolver. Name/balance/advances are snapshots copied from the employee
    at compute time, not sources of truth.
    """

    employee_code: str
    day: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None

    absence: bool = False
    annual_leave: bool = False
    medical_leave: bool = False
    official_leave: bool = False
    leave_compensation: Decimal = ZERO
    appropriate_value: Decimal = ZERO

    state: Optional[DayState] = None
    work_hours: float = 0.0
    overtime: float = 0.0
    late_minutes: int = 0
    late_deduction: float = 0.0
    early_leave_deduction: float = 0.0
    medical_leave_deduction: float = 0.0
    appropriate_value_days: int = 0
    is_single_fingerprint: bool = False
    late_allowance_consumed: int = 0

    employee_name: str = ""
    work_days_per_week: int = DEFAULT_WORK_DAYS_PER_WEEK
    annual_leave_balance: int = DEFAULT_ANNUAL_LEAVE_BALANCE
    custom_annual_leave: int = 0
    advances: Decimal = ZERO

    record_id: Optional[int] = None

    @property
    def key(self) -> tuple[str, date]:
        return (self.employee_code, self.day)

    @property
    def signals(self) -> StatusSignals:
        return StatusSignals(
            absence=self.absence,
            annual_leave=self.annual_leave,
            medical_leave=self.medical_leave,
            official_leave=self.official_leave,
            leave_compensation=self.leave_compensation,
            appropriate_value=self.appropriate_value,
        )

    def with_signals(self, signals: StatusSignals) -> "AttendanceRecord":
        return replace(
            self,
            absence=signals.absence,
            annual_leave=signals.annual_leave,
            medical_leave=signals.medical_leave,
            official_leave=signals.official_leave,
            leave_compensation=signals.leave_compensation,
            appropriate_value=signals.appropriate_value,
        )


@dataclass(frozen=True)
class DayUpdate:
    """Manual entry or correction of a day.

    ``None`` leaves a field unchanged. Naming any status replaces the whole
    status group (unnamed statuses are cleared).
    """

    employee_code: str
    day: date
    check_in: PunchValue = None
    check_out: PunchValue = None
    clear_punches: bool = False
    absence: Optional[bool] = None
    annual_leave: Optional[bool] = None
    medical_leave: Optional[bool] = None
    official_leave: Optional[bool] = None
    leave_compensation: Optional[Decimal] = None
    appropriate_value: Optional[Decimal] = None

    @property
    def names_status(self) -> bool:
        return any(
            v is not None
            for v in (
                self.absence,
                self.annual_leave,
                self.medical_leave,
                self.official_leave,
                self.leave_compensation,
                self.appropriate_value,
            )
        )


@dataclass(frozen=True)
class PunchRow:
    """Normalized row handed over by punch ingestion."""

    employee_code: str
    day: date
    check_in: PunchValue = None
    check_out: PunchValue = None
    official_leave: bool = False
    leave_compensation: bool = False
    appropriate_value: Optional[Decimal] = None
