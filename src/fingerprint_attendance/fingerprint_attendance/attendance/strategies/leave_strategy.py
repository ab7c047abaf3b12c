from __future__ import annotations

from ...common.datetime_utils import at_local_time
from ...common.numbers import round2
from ...core.enums import DayState
from ..model import AttendanceRecord
from .base import DayContext, DayStrategy, cleared


class AnnualLeaveStrategy(DayStrategy):
    """Paid leave day: a full shift is credited at the employee's shift times.

    The balance check and decrement happen in the resolver, on the transition edge.
    """

    state = DayState.ANNUAL_LEAVE

    def compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        employee = ctx.employee
        return cleared(
            record,
            self.state,
            annual_leave=True,
            work_hours=round2(employee.work_hours_per_day),
            check_in=at_local_time(record.day, employee.shift_start, ctx.tz),
            check_out=at_local_time(record.day, employee.shift_end, ctx.tz),
        )


class OfficialLeaveStrategy(DayStrategy):
    state = DayState.OFFICIAL_LEAVE

    def compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        return cleared(record, self.state, official_leave=True)


class MedicalLeaveStrategy(DayStrategy):
    """Sick day: only the configured medical deduction fraction is charged."""

    state = DayState.MEDICAL_LEAVE

    def compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        return cleared(
            record,
            self.state,
            medical_leave=True,
            medical_leave_deduction=round2(ctx.employee.medical_leave_deduction),
        )
