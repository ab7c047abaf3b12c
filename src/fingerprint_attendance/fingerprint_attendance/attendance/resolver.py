from __future__ import annotations

import logging
from dataclasses import replace
from datetime import tzinfo
from typing import Optional

from ..common.datetime_utils import get_zone
from ..core.exceptions import InsufficientLeaveBalance
from ..ledgers.annual_leave import AnnualLeaveLedger, OfficialLeaveCounter
from ..ledgers.book import LedgerBook
from ..ledgers.late_allowance import LateAllowanceLedger
from .classifier import classify
from .factory import DayStrategyFactory
from .model import AttendanceRecord
from .strategies.base import DayContext

logger = logging.getLogger(__name__)


class AttendanceResolver:
    """Computes a day's derived fields and moves the ledgers on status edges.

    Ledger edges come from the diff between the persisted ``prior`` record and
    the computed result, so saving the same record twice charges nothing twice.
    All ledger movements go to the ``LedgerBook`` and are persisted by its owner.
    """

    def __init__(self, book: LedgerBook, *, tz: Optional[tzinfo] = None, factory: Optional[DayStrategyFactory] = None):
        self._book = book
        self._tz = tz or get_zone()
        self._factory = factory or DayStrategyFactory()
        self._annual = AnnualLeaveLedger(book)
        self._official = OfficialLeaveCounter(book)

    def resolve(
        self,
        proposal: AttendanceRecord,
        prior: Optional[AttendanceRecord] = None,
        *,
        late_allowance: Optional[LateAllowanceLedger] = None,
    ) -> AttendanceRecord:
        code = proposal.employee_code
        employee = self._book.employee(code)

        category = classify(proposal.signals, employee_code=code)
        strategy = self._factory.for_record(proposal, employee, category)
        ctx = DayContext(
            employee=employee,
            late_allowance=late_allowance or LateAllowanceLedger(self._book),
            tz=self._tz,
        )
        result = strategy.compute(proposal, ctx)
        classify(result.signals, employee_code=code)

        self._apply_edges(prior, result)
        logger.debug("%s %s resolved as %s", code, proposal.day, result.state.value)

        return replace(
            result,
            employee_name=employee.full_name,
            work_days_per_week=employee.work_days_per_week,
            annual_leave_balance=self._annual.balance(code),
            custom_annual_leave=employee.custom_annual_leave,
            advances=employee.advances,
            record_id=prior.record_id if prior is not None else proposal.record_id,
        )

    def release(self, prior: AttendanceRecord) -> None:
        """Reverse the ledger effects of a record that is being deleted."""

        code = prior.employee_code
        if prior.annual_leave:
            self._annual.restore(code)
        if prior.official_leave:
            self._official.decrement(code)

    def _apply_edges(self, prior: Optional[AttendanceRecord], result: AttendanceRecord) -> None:
        code = result.employee_code
        was_annual = prior is not None and prior.annual_leave
        was_official = prior is not None and prior.official_leave

        if result.annual_leave and not was_annual:
            if self._annual.balance(code) <= 0:
                raise InsufficientLeaveBalance(f"No annual leave balance left for {code}")
            self._annual.decrement(code)
        elif was_annual and not result.annual_leave:
            self._annual.restore(code)

        if result.official_leave and not was_official:
            self._official.increment(code)
        elif was_official and not result.official_leave:
            self._official.decrement(code)
