from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal

from ..common.numbers import round2


@dataclass
class EmployeeAttendanceSummary:
    """Per-employee totals over a date range, consumed by bonus/salary reporting."""

    employee_code: str
    employee_name: str
    start: date
    end: date
    work_days: int = 0
    absences: int = 0
    weekly_off_days: int = 0
    annual_leave_days: int = 0
    medical_leave_days: int = 0
    official_leave_days: int = 0
    leave_compensation_days: int = 0
    leave_compensation_total: Decimal = Decimal("0.00")
    appropriate_value_days: int = 0
    appropriate_value_total: Decimal = Decimal("0.00")
    single_punch_days: int = 0
    invalid_punch_days: int = 0
    total_work_hours: float = 0.0
    total_overtime: float = 0.0
    late_deduction_days: float = 0.0
    early_leave_deduction_days: float = 0.0
    medical_deduction_days: float = 0.0

    @property
    def total_leave_days(self) -> int:
        return self.annual_leave_days + self.medical_leave_days + self.official_leave_days + self.leave_compensation_days

    @property
    def total_deduction_days(self) -> float:
        return round2(self.late_deduction_days + self.early_leave_deduction_days + self.medical_deduction_days)

    def as_dict(self) -> dict:
        data = asdict(self)
        data["start"] = self.start.isoformat()
        data["end"] = self.end.isoformat()
        data["leave_compensation_total"] = str(self.leave_compensation_total)
        data["appropriate_value_total"] = str(self.appropriate_value_total)
        data["total_leave_days"] = self.total_leave_days
        data["total_deduction_days"] = self.total_deduction_days
        return data
