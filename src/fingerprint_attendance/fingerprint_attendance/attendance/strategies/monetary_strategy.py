from __future__ import annotations

import logging
from decimal import Decimal

from ...common.numbers import to_money
from ...core.constants import LEAVE_COMPENSATION_DAYS, LEAVE_COMPENSATION_MONTH_DAYS
from ...core.enums import DayState
from ...core.exceptions import ValidationError
from ...employees.model import Employee
from ..model import AttendanceRecord
from .base import DayContext, DayStrategy, cleared

logger = logging.getLogger(__name__)


def leave_compensation_amount(employee: Employee) -> Decimal:
    """Two days of a 30-day month of base salary."""

    salary = Decimal(str(employee.base_salary or 0))
    if salary <= 0:
        raise ValidationError(f"Employee {employee.code} has no base salary for leave compensation")
    return to_money(salary / LEAVE_COMPENSATION_MONTH_DAYS * LEAVE_COMPENSATION_DAYS)


class LeaveCompensationStrategy(DayStrategy):
    """Paid instead of a leave day.

    A day already computed as leave compensation keeps its amount when the
    employee no longer has a base salary; a new one is rejected.
    """

    state = DayState.LEAVE_COMPENSATION

    def compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        try:
            amount = leave_compensation_amount(ctx.employee)
        except ValidationError:
            if record.state != self.state:
                raise
            logger.warning(
                "Keeping stored leave compensation %s for %s on %s: no base salary",
                record.leave_compensation,
                record.employee_code,
                record.day,
            )
            amount = to_money(record.leave_compensation)
        return cleared(record, self.state, leave_compensation=amount)


class AppropriateValueStrategy(DayStrategy):
    state = DayState.APPROPRIATE_VALUE

    def compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        return cleared(
            record,
            self.state,
            appropriate_value=to_money(record.appropriate_value),
            appropriate_value_days=1,
        )
