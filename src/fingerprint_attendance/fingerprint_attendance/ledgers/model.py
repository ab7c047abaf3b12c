from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..employees.model import Employee


@dataclass
class LedgerEntry:
    """Mutable working copy of one employee's ledger fields.

    Lives only for the duration of a unit of work; flushed to the
    employee directory when the unit commits.
    """

    employee_code: str
    monthly_late_allowance: int
    remaining_late_allowance: int
    late_allowance_period: Optional[date]
    annual_leave_balance: int
    total_official_leave_days: int

    @classmethod
    def from_employee(cls, employee: Employee) -> "LedgerEntry":
        return cls(
            employee_code=employee.code,
            monthly_late_allowance=int(employee.monthly_late_allowance),
            remaining_late_allowance=int(employee.remaining_late_allowance),
            late_allowance_period=employee.late_allowance_period,
            annual_leave_balance=int(employee.annual_leave_balance),
            total_official_leave_days=int(employee.total_official_leave_days),
        )

    def copy(self) -> "LedgerEntry":
        return LedgerEntry(**vars(self))
