from __future__ import annotations

import logging
from datetime import datetime

from ...common.datetime_utils import at_local_time, to_local
from ...common.numbers import round2
from ...core.constants import (
    EARLY_LEAVE_HALF_DAY_UNTIL,
    EARLY_LEAVE_QUARTER_DAY_UNTIL,
    HALF_DAY,
    HALF_DAY_LATE_AFTER,
    LATE_GRACE_END,
    MAX_DAILY_HOURS,
    OFFICIAL_START,
    QUARTER_DAY,
)
from ...core.enums import DayState
from ...core.exceptions import ComputationAnomaly
from ..model import AttendanceRecord
from .base import DayContext, DayStrategy, cleared

logger = logging.getLogger(__name__)


class SinglePunchStrategy(DayStrategy):
    """Only one of check-in/check-out recorded: credited as a full day."""

    state = DayState.SINGLE_PUNCH

    def compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        return cleared(
            record,
            self.state,
            work_hours=round2(ctx.employee.work_hours_per_day),
            is_single_fingerprint=True,
        )


class WorkedStrategy(DayStrategy):
    """Both punches present: hours, overtime, lateness and early leave.

    Impossible punch pairs are saved as a zero INVALID_PUNCHES day and logged.
    """

    state = DayState.WORKED

    def compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        try:
            return self._compute(record, ctx)
        except ComputationAnomaly as exc:
            logger.warning("Invalid punches for %s on %s: %s", record.employee_code, record.day, exc)
            return cleared(record, DayState.INVALID_PUNCHES)

    def _compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        check_in = to_local(record.check_in, ctx.tz)
        check_out = to_local(record.check_out, ctx.tz)
        if check_out < check_in:
            raise ComputationAnomaly(f"check-out {check_out:%H:%M} before check-in {check_in:%H:%M}")

        hours = (check_out - check_in).total_seconds() / 3600
        if hours > MAX_DAILY_HOURS:
            raise ComputationAnomaly(f"{hours:.2f} hours in one day")

        work_hours = round2(hours)
        late_minutes, late_deduction, consumed = self._lateness(record, check_in, ctx)

        return cleared(
            record,
            self.state,
            check_in=check_in,
            check_out=check_out,
            work_hours=work_hours,
            overtime=round2(max(work_hours - ctx.employee.work_hours_per_day, 0)),
            late_minutes=late_minutes,
            late_deduction=late_deduction,
            early_leave_deduction=self._early_leave(check_out),
            late_allowance_consumed=consumed,
        )

    def _lateness(self, record: AttendanceRecord, check_in: datetime, ctx: DayContext) -> tuple[int, float, int]:
        arrived = check_in.time()
        if arrived <= LATE_GRACE_END:
            return 0, 0.0, 0

        start = at_local_time(record.day, OFFICIAL_START, ctx.tz)
        late_minutes = int((check_in - start).total_seconds() // 60)

        # Absorbed entirely by the allowance, or the tier applies while the rest is still used up.
        remaining = ctx.late_allowance.remaining(record.employee_code)
        if late_minutes <= remaining:
            deduction = 0.0
        elif arrived <= HALF_DAY_LATE_AFTER:
            deduction = QUARTER_DAY
        else:
            deduction = HALF_DAY
        consumed = ctx.late_allowance.consume(record.employee_code, late_minutes)
        return late_minutes, deduction, consumed

    def _early_leave(self, check_out: datetime) -> float:
        left = check_out.time()
        if left <= EARLY_LEAVE_HALF_DAY_UNTIL:
            return HALF_DAY
        if left <= EARLY_LEAVE_QUARTER_DAY_UNTIL:
            return QUARTER_DAY
        return 0.0
