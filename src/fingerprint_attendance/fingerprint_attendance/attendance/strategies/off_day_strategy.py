from __future__ import annotations

from ...core.constants import FULL_DAY
from ...core.enums import DayState
from ..model import AttendanceRecord
from .base import DayContext, DayStrategy, cleared


class WeeklyOffStrategy(DayStrategy):
    """Scheduled day off. Overrides any leftover status on the record."""

    state = DayState.WEEKLY_OFF

    def compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        return cleared(record, self.state)


class AbsentStrategy(DayStrategy):
    """Working day with no punch at all: a full day is deducted."""

    state = DayState.ABSENT

    def compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        return cleared(record, self.state, absence=True, early_leave_deduction=FULL_DAY)
