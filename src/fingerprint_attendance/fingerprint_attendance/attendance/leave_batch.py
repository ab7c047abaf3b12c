from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from ..common.datetime_utils import iter_days
from ..common.validators import require_date_range, require_non_negative_amount, require_not_future
from ..core.enums import LeaveKind
from ..core.exceptions import DomainError, InsufficientLeaveBalance, ValidationError
from ..employees.repository import EmployeeRepository
from ..ledgers.annual_leave import AnnualLeaveLedger
from ..schedules.policy import is_weekly_off
from .model import ZERO, AttendanceRecord, StatusSignals
from .service import AttendanceService
from .strategies.monetary_strategy import leave_compensation_amount
from .unit_of_work import EmployeeDays

logger = logging.getLogger(__name__)

# Days already on one of these leaves are not converted to leave compensation.
_LEAVE_FLAGS = ("annual_leave", "medical_leave", "official_leave")


@dataclass(frozen=True)
class EmployeeLeaveResult:
    employee_code: str
    applied: int = 0
    skipped: int = 0


@dataclass
class LeaveBatchResult:
    kind: LeaveKind
    date_from: date
    date_to: date
    results: List[EmployeeLeaveResult] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def applied(self) -> int:
        return sum(r.applied for r in self.results)

    @property
    def skipped(self) -> int:
        return sum(r.skipped for r in self.results)


class LeaveBatchService:
    """Declares one leave kind over a date range, for one employee or everyone.

    Weekly-off days in the range are never touched. Each employee is one
    unit of work: a failure leaves that employee's days and ledgers as they were.
    """

    def __init__(self, attendance: AttendanceService, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def apply(
        self,
        kind: LeaveKind,
        date_from: date,
        date_to: date,
        employee_code: Optional[str] = None,
        amount: Optional[Decimal] = None,
    ) -> LeaveBatchResult:
        kind = self._parse_kind(kind)
        require_date_range(date_from, date_to)
        require_not_future(date_to, self._attendance.today(), "date_to")

        value = ZERO
        if kind == LeaveKind.APPROPRIATE_VALUE:
            value = require_non_negative_amount(amount, "amount")
            if value <= 0:
                raise ValidationError("Appropriate value amount must be greater than zero")

        result = LeaveBatchResult(kind=kind, date_from=date_from, date_to=date_to)

        # A single employee surfaces its error to the caller.
        if employee_code:
            result.results.append(self._apply_employee(employee_code, kind, date_from, date_to, value))
            return result

        codes = [e.code for e in self._employees.list_all()]
        outcomes = self._attendance.run_per_employee(
            codes,
            lambda code: self._apply_employee(code, kind, date_from, date_to, value),
            label=f"{kind.value} leave batch",
        )
        for code in sorted(outcomes):
            outcome = outcomes[code]
            if isinstance(outcome, DomainError):
                result.errors[code] = str(outcome)
            else:
                result.results.append(outcome)

        logger.info(
            "%s leave batch %s..%s: applied=%s skipped=%s errors=%s",
            kind.value,
            date_from,
            date_to,
            result.applied,
            result.skipped,
            len(result.errors),
        )
        return result

    @staticmethod
    def _parse_kind(kind) -> LeaveKind:
        try:
            return LeaveKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown leave kind: {kind!r}")

    def _apply_employee(
        self, code: str, kind: LeaveKind, date_from: date, date_to: date, value: Decimal
    ) -> EmployeeLeaveResult:
        with self._attendance.unit(code) as days:
            employee = days.employee
            days.preload(date_from, date_to)
            working = [d for d in iter_days(date_from, date_to) if not is_weekly_off(d, employee.work_days_per_week)]
            skipped = 0

            if kind == LeaveKind.LEAVE_COMPENSATION:
                if employee.base_salary is None or employee.base_salary <= 0:
                    logger.warning("Skipping leave compensation for %s: no base salary", code)
                    return EmployeeLeaveResult(employee_code=code, skipped=len(working))
                targets = [d for d in working if not self._on_leave(days, d)]
                skipped = len(working) - len(targets)
                signals = StatusSignals(leave_compensation=leave_compensation_amount(employee))
            elif kind == LeaveKind.ANNUAL:
                targets = working
                self._check_annual_balance(days, targets)
                signals = StatusSignals(annual_leave=True)
            elif kind == LeaveKind.MEDICAL:
                targets = working
                signals = StatusSignals(medical_leave=True)
            elif kind == LeaveKind.OFFICIAL:
                targets = working
                signals = StatusSignals(official_leave=True)
            else:
                targets = working
                signals = StatusSignals(appropriate_value=value)

            for day in targets:
                base = days.current(day) or AttendanceRecord(employee_code=code, day=day)
                days.put(replace(base.with_signals(signals), check_in=None, check_out=None))

        return EmployeeLeaveResult(employee_code=code, applied=len(targets), skipped=skipped)

    @staticmethod
    def _on_leave(days: EmployeeDays, day: date) -> bool:
        record = days.current(day)
        return record is not None and any(getattr(record, flag) for flag in _LEAVE_FLAGS)

    @staticmethod
    def _check_annual_balance(days: EmployeeDays, targets: List[date]) -> None:
        needed = 0
        for day in targets:
            record = days.current(day)
            if record is None or not record.annual_leave:
                needed += 1
        balance = AnnualLeaveLedger(days.book).balance(days.employee_code)
        if needed > balance:
            raise InsufficientLeaveBalance(
                f"{days.employee_code} needs {needed} annual leave days but has {balance}"
            )
