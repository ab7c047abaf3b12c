from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Set, Tuple

from ..common.datetime_utils import iter_days, month_end, month_start
from ..employees.model import Employee
from ..ledgers.book import LedgerBook
from ..ledgers.late_allowance import LateAllowanceLedger
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .resolver import AttendanceResolver

logger = logging.getLogger(__name__)


class EmployeeDays:
    """Unit of work over one employee's attendance days.

    Records are staged in memory and ledgers mutated in a ``LedgerBook``;
    nothing reaches the stores until ``flush``. Every month touched by the
    unit is replayed in date order on flush, so the late allowance is
    always charged chronologically whatever order the days were edited in.

    The caller holds the employee's lock for the lifetime of the unit.
    """

    def __init__(
        self,
        employee_code: str,
        *,
        attendance: AttendanceRepository,
        book: LedgerBook,
        resolver: AttendanceResolver,
        today: date,
    ):
        self.employee_code = employee_code
        self._attendance = attendance
        self._book = book
        self._resolver = resolver
        self._today = today
        self._stored: Dict[date, Optional[AttendanceRecord]] = {}
        self._staged: Dict[date, AttendanceRecord] = {}
        self._deleted: Dict[date, AttendanceRecord] = {}
        self._months: Set[date] = set()

    @property
    def employee(self) -> Employee:
        return self._book.employee(self.employee_code)

    @property
    def book(self) -> LedgerBook:
        return self._book

    def current(self, day: date) -> Optional[AttendanceRecord]:
        if day in self._deleted:
            return None
        if day in self._staged:
            return self._staged[day]
        if day not in self._stored:
            self._stored[day] = self._attendance.find_one(self.employee_code, day)
        return self._stored[day]

    def preload(self, start: date, end: date) -> None:
        """Fetch [start, end] in one query; days with no record are remembered as empty."""

        found = {r.day: r for r in self._attendance.list_for_employee(self.employee_code, start, end)}
        for day in iter_days(start, end):
            self._stored.setdefault(day, found.get(day))

    def put(self, proposal: AttendanceRecord) -> AttendanceRecord:
        prior = self.current(proposal.day)
        # Allowance is charged for real by the month replay in flush().
        scratch = LateAllowanceLedger(self._book.detached())
        result = self._resolver.resolve(proposal, prior, late_allowance=scratch)
        self._deleted.pop(proposal.day, None)
        self._staged[proposal.day] = result
        self.touch(proposal.day)
        return result

    def remove(self, day: date) -> Optional[AttendanceRecord]:
        prior = self.current(day)
        if prior is None:
            return None
        self._resolver.release(prior)
        self._staged.pop(day, None)
        self._deleted[day] = prior
        self.touch(day)
        return prior

    def touch(self, day: date) -> None:
        self._months.add(month_start(day))

    def flush(self) -> Tuple[List[AttendanceRecord], List[AttendanceRecord]]:
        for start in sorted(self._months):
            self._replay(start)

        written: List[AttendanceRecord] = []
        for day in sorted(self._staged):
            record = self._staged[day]
            if record != self._stored.get(day):
                saved = self._attendance.upsert(record)
                self._staged[day] = saved
                self._stored[day] = saved
                written.append(saved)

        deleted: List[AttendanceRecord] = []
        for day in sorted(self._deleted):
            record = self._deleted[day]
            if self._attendance.delete(record):
                deleted.append(record)
            self._stored[day] = None
        self._deleted.clear()

        self._book.commit()
        self._months.clear()
        logger.debug("Flushed %s: %s written, %s deleted", self.employee_code, len(written), len(deleted))
        return written, deleted

    def _replay(self, start: date) -> None:
        end = month_end(start)
        for record in self._attendance.list_for_employee(self.employee_code, start, end):
            self._stored.setdefault(record.day, record)

        days = {d for d, r in self._stored.items() if r is not None and start <= d <= end}
        days |= {d for d in self._staged if start <= d <= end}
        days -= set(self._deleted)

        ledger, live = self._allowance_for(start)
        ledger.reset(self.employee_code, period=start if live else None)
        for day in sorted(days):
            record = self.current(day)
            self._staged[day] = self._resolver.resolve(record, record, late_allowance=ledger)

    def _allowance_for(self, start: date) -> Tuple[LateAllowanceLedger, bool]:
        """The live budget if ``start`` is the month it belongs to, else a scratch copy."""

        live = LateAllowanceLedger(self._book)
        period = live.period(self.employee_code)
        if period == start or (period is None and start == month_start(self._today)):
            return live, True
        return LateAllowanceLedger(self._book.detached()), False
