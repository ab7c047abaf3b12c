from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import StatusCategory
from ..employees.model import Employee
from ..schedules.policy import is_weekly_off
from .model import AttendanceRecord
from .strategies.base import DayStrategy
from .strategies.leave_strategy import AnnualLeaveStrategy, MedicalLeaveStrategy, OfficialLeaveStrategy
from .strategies.monetary_strategy import AppropriateValueStrategy, LeaveCompensationStrategy
from .strategies.off_day_strategy import AbsentStrategy, WeeklyOffStrategy
from .strategies.punch_strategy import SinglePunchStrategy, WorkedStrategy

# Status precedence, first match wins. Absence is not listed: it is re-derived from punches.
_STATUS_STRATEGIES = (
    (StatusCategory.LEAVE_COMPENSATION, LeaveCompensationStrategy),
    (StatusCategory.ANNUAL_LEAVE, AnnualLeaveStrategy),
    (StatusCategory.APPROPRIATE_VALUE, AppropriateValueStrategy),
    (StatusCategory.OFFICIAL_LEAVE, OfficialLeaveStrategy),
    (StatusCategory.MEDICAL_LEAVE, MedicalLeaveStrategy),
)


@dataclass
class DayStrategyFactory:
    """Factory Pattern: choose the strategy for a day from its status, calendar and punches."""

    def for_record(self, record: AttendanceRecord, employee: Employee, category: StatusCategory) -> DayStrategy:
        for status, strategy in _STATUS_STRATEGIES:
            if category == status:
                return strategy()

        if is_weekly_off(record.day, employee.work_days_per_week):
            return WeeklyOffStrategy()

        has_in = record.check_in is not None
        has_out = record.check_out is not None
        if has_in != has_out:
            return SinglePunchStrategy()
        if not has_in:
            return AbsentStrategy()
        return WorkedStrategy()
