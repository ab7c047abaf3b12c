from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.numbers import round2, to_money
from ..common.validators import require_date_range
from ..core.enums import DayState
from .model import EmployeeAttendanceSummary

# States that count as a day at work (no status, not a scheduled day off).
_WORK_STATES = {DayState.WORKED, DayState.SINGLE_PUNCH, DayState.INVALID_PUNCHES}

_STATE_COUNTERS = {
    DayState.ABSENT: "absences",
    DayState.WEEKLY_OFF: "weekly_off_days",
    DayState.ANNUAL_LEAVE: "annual_leave_days",
    DayState.MEDICAL_LEAVE: "medical_leave_days",
    DayState.OFFICIAL_LEAVE: "official_leave_days",
    DayState.LEAVE_COMPENSATION: "leave_compensation_days",
    DayState.APPROPRIATE_VALUE: "appropriate_value_days",
    DayState.SINGLE_PUNCH: "single_punch_days",
    DayState.INVALID_PUNCHES: "invalid_punch_days",
}


class AttendanceSummaryService:
    """Read model over computed records. No salary math happens here."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def build(self, start: date, end: date, employee_code: Optional[str] = None) -> List[EmployeeAttendanceSummary]:
        require_date_range(start, end)
        if employee_code:
            records = self._attendance.list_for_employee(employee_code, start, end)
        else:
            records = self._attendance.list_range(start, end)

        by_code: Dict[str, EmployeeAttendanceSummary] = {}
        for r in records:
            s = by_code.get(r.employee_code)
            if s is None:
                s = EmployeeAttendanceSummary(employee_code=r.employee_code, employee_name=r.employee_name, start=start, end=end)
                by_code[r.employee_code] = s
            self._add(s, r)

        return [self._rounded(by_code[code]) for code in sorted(by_code)]

    @staticmethod
    def _add(s: EmployeeAttendanceSummary, r: AttendanceRecord) -> None:
        if r.employee_name:
            s.employee_name = r.employee_name
        if r.state in _WORK_STATES:
            s.work_days += 1
        counter = _STATE_COUNTERS.get(r.state)
        if counter:
            setattr(s, counter, getattr(s, counter) + 1)

        s.leave_compensation_total += r.leave_compensation
        s.appropriate_value_total += r.appropriate_value
        s.total_work_hours += r.work_hours
        s.total_overtime += r.overtime
        s.late_deduction_days += r.late_deduction
        s.early_leave_deduction_days += r.early_leave_deduction
        s.medical_deduction_days += r.medical_leave_deduction

    @staticmethod
    def _rounded(s: EmployeeAttendanceSummary) -> EmployeeAttendanceSummary:
        return replace(
            s,
            leave_compensation_total=to_money(s.leave_compensation_total),
            appropriate_value_total=to_money(s.appropriate_value_total),
            total_work_hours=round2(s.total_work_hours),
            total_overtime=round2(s.total_overtime),
            late_deduction_days=round2(s.late_deduction_days),
            early_leave_deduction_days=round2(s.early_leave_deduction_days),
            medical_deduction_days=round2(s.medical_deduction_days),
        )
