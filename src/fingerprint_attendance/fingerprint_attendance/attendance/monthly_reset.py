from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Optional

from ..common.datetime_utils import month_start, previous_month_start
from ..core.exceptions import DomainError
from ..employees.repository import EmployeeRepository
from .service import AttendanceService

logger = logging.getLogger(__name__)


@dataclass
class MonthlyResetReport:
    period: date
    reset: int = 0
    backfilled: int = 0
    errors: Dict[str, str] = field(default_factory=dict)


class MonthlyResetJob:
    """Start-of-month job, triggered by an external scheduler.

    Refills every employee's late allowance for the month containing
    ``today`` and backfills the previous month's missing days.
    """

    def __init__(self, attendance: AttendanceService, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def run(self, today: Optional[date] = None) -> MonthlyResetReport:
        today = today or self._attendance.today()
        period = month_start(today)
        report = MonthlyResetReport(period=period)

        codes = [e.code for e in self._employees.list_all()]
        outcomes = self._attendance.run_per_employee(
            codes,
            lambda code: self._attendance.reset_late_allowance(code, period),
            label="late allowance reset",
        )
        for code, outcome in outcomes.items():
            if isinstance(outcome, DomainError):
                report.errors[code] = str(outcome)
            else:
                report.reset += 1

        report.backfilled = self._attendance.backfill_missing_days(
            previous_month_start(today), period - timedelta(days=1)
        )
        logger.info(
            "Monthly reset for %s: %s allowances reset, %s days backfilled, %s errors",
            period.strftime("%Y-%m"),
            report.reset,
            report.backfilled,
            len(report.errors),
        )
        return report
