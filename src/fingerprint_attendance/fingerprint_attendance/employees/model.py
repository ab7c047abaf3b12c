from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..core.constants import (
    DEFAULT_ANNUAL_LEAVE_BALANCE,
    DEFAULT_MEDICAL_LEAVE_DEDUCTION,
    DEFAULT_MONTHLY_LATE_ALLOWANCE,
    DEFAULT_SHIFT_END,
    DEFAULT_SHIFT_START,
    DEFAULT_WORK_DAYS_PER_WEEK,
    DEFAULT_WORK_HOURS_PER_DAY,
)


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee, as owned by the employee directory.

    The engine only writes the ledger fields (annual_leave_balance,
    remaining_late_allowance / late_allowance_period, total_official_leave_days).
    """

    code: str
    full_name: str
    work_days_per_week: int = DEFAULT_WORK_DAYS_PER_WEEK
    work_hours_per_day: float = DEFAULT_WORK_HOURS_PER_DAY
    check_in_hour: int = DEFAULT_SHIFT_START.hour
    check_in_minute: int = DEFAULT_SHIFT_START.minute
    check_out_hour: int = DEFAULT_SHIFT_END.hour
    check_out_minute: int = DEFAULT_SHIFT_END.minute
    base_salary: Decimal = Decimal("0")
    monthly_late_allowance: int = DEFAULT_MONTHLY_LATE_ALLOWANCE
    remaining_late_allowance: int = DEFAULT_MONTHLY_LATE_ALLOWANCE
    late_allowance_period: Optional[date] = None
    annual_leave_balance: int = DEFAULT_ANNUAL_LEAVE_BALANCE
    custom_annual_leave: int = 0
    medical_leave_deduction: float = DEFAULT_MEDICAL_LEAVE_DEDUCTION
    total_official_leave_days: int = 0
    advances: Decimal = Decimal("0")

    @property
    def shift_start(self) -> time:
        return time(self.check_in_hour, self.check_in_minute)

    @property
    def shift_end(self) -> time:
        return time(self.check_out_hour, self.check_out_minute)
