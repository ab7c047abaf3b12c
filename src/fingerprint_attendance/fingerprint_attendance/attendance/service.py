from __future__ import annotations

import logging
from collections import Counter, defaultdict
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from datetime import date, datetime, tzinfo
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, TypeVar, Union

from ..common.datetime_utils import PunchValue, get_zone, iter_days, month_end, month_start, now_local, parse_punch
from ..common.locks import EmployeeLocks
from ..common.validators import require_date_range, require_non_empty, require_non_negative_amount, require_not_future
from ..core.constants import DEFAULT_BULK_WORKERS
from ..core.exceptions import DomainError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..ledgers.book import LedgerBook
from ..ledgers.late_allowance import LateAllowanceLedger
from .classifier import classify
from .factory import DayStrategyFactory
from .model import ZERO, AttendanceRecord, DayUpdate, PunchRow, StatusSignals
from .repository import AttendanceRepository, TransactionManager
from .resolver import AttendanceResolver
from .strategies.monetary_strategy import leave_compensation_amount
from .unit_of_work import EmployeeDays

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ImportSummary:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0

    def __add__(self, other: "ImportSummary") -> "ImportSummary":
        return ImportSummary(**{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)})

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class AttendanceService:
    """Use cases over attendance days.

    Every write runs as one unit per employee (``EmployeeDays``) under that
    employee's lock and inside one store transaction: records and ledgers are
    computed in memory and committed together only if the whole unit succeeds.
    The employee row is read for update, which also serializes writers in
    other processes. Bulk operations fan out over employees on a thread pool.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        transactions: TransactionManager,
        locks: Optional[EmployeeLocks] = None,
        tz: Optional[tzinfo] = None,
        clock: Optional[Callable[[], datetime]] = None,
        bulk_workers: int = DEFAULT_BULK_WORKERS,
        strategy_factory: Optional[DayStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._transactions = transactions
        self._locks = locks or EmployeeLocks()
        self._tz = tz or get_zone()
        self._clock = clock or (lambda: now_local(self._tz))
        self._bulk_workers = max(int(bulk_workers), 1)
        self._factory = strategy_factory or DayStrategyFactory()

    def today(self) -> date:
        return self._clock().date()

    @contextmanager
    def unit(self, employee_code: str) -> Iterator[EmployeeDays]:
        """Lock the employee, yield a unit of work, flush and commit it on clean exit."""

        with self._locks.hold(employee_code), self._transactions.transaction(employee_code):
            book = LedgerBook(self._employees, for_update=True)
            book.employee(employee_code)
            days = EmployeeDays(
                employee_code,
                attendance=self._attendance,
                book=book,
                resolver=AttendanceResolver(book, tz=self._tz, factory=self._factory),
                today=self.today(),
            )
            yield days
            days.flush()

    def run_per_employee(
        self,
        codes: Iterable[str],
        work: Callable[[str], T],
        *,
        label: str = "bulk job",
    ) -> Dict[str, Union[T, DomainError]]:
        """Run ``work`` for each employee on the pool; domain errors are returned, not raised."""

        results: Dict[str, Union[T, DomainError]] = {}
        with ThreadPoolExecutor(max_workers=self._bulk_workers) as executor:
            future_to_code = {executor.submit(work, code): code for code in codes}
            for future in as_completed(future_to_code):
                code = future_to_code[future]
                try:
                    results[code] = future.result()
                except DomainError as exc:
                    logger.warning("%s failed for %s: %s", label, code, exc)
                    results[code] = exc
        return results

    # Reads

    def get_day(self, employee_code: str, day: date) -> Optional[AttendanceRecord]:
        return self._attendance.find_one(employee_code, day)

    def list_days(self, employee_code: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        require_date_range(start, end)
        return self._attendance.list_for_employee(employee_code, start, end)

    # Writes

    def save_day(self, update: DayUpdate) -> AttendanceRecord:
        code = require_non_empty(update.employee_code, "Employee code")
        require_not_future(update.day, self.today())

        with self.unit(code) as days:
            prior = days.current(update.day)
            days.put(self._merge(prior or AttendanceRecord(employee_code=code, day=update.day), update))
        return days.current(update.day)

    def delete_day(self, employee_code: str, day: date) -> bool:
        with self.unit(employee_code) as days:
            removed = days.remove(day)
        if removed is not None:
            logger.info("Deleted attendance day %s %s (%s)", employee_code, day, removed.state.value if removed.state else "-")
        return removed is not None

    def import_punches(self, rows: Iterable[PunchRow]) -> ImportSummary:
        today = self.today()
        grouped: Dict[str, List[PunchRow]] = defaultdict(list)
        for row in rows:
            grouped[str(row.employee_code).strip()].append(row)

        outcomes = self.run_per_employee(
            sorted(grouped),
            lambda code: self._import_employee(code, grouped[code], today),
            label="punch import",
        )

        summary = ImportSummary()
        for code, outcome in outcomes.items():
            if isinstance(outcome, DomainError):
                summary += ImportSummary(failed=len(grouped[code]))
            else:
                summary += outcome
        logger.info("Punch import finished: %s", summary.as_dict())
        return summary

    def backfill_missing_days(self, start: date, end: date, employee_code: Optional[str] = None) -> int:
        """Create WEEKLY_OFF / ABSENT records for past days that have none."""

        require_date_range(start, end)
        end = min(end, self.today())
        if end < start:
            return 0

        if employee_code:
            return self._backfill_employee(employee_code, start, end)

        codes = [e.code for e in self._employees.list_all()]
        outcomes = self.run_per_employee(codes, lambda code: self._backfill_employee(code, start, end), label="backfill")
        created = sum(v for v in outcomes.values() if not isinstance(v, DomainError))
        logger.info("Backfilled %s missing days between %s and %s", created, start, end)
        return created

    def rederive_month(self, employee_code: str, year: int, month: int) -> Sequence[AttendanceRecord]:
        try:
            start = date(int(year), int(month), 1)
        except ValueError:
            raise ValidationError(f"Invalid month: {year}-{month}")

        with self.unit(employee_code) as days:
            days.touch(start)
        return self._attendance.list_for_employee(employee_code, start, month_end(start))

    def reset_late_allowance(self, employee_code: str, period: date) -> int:
        """Refill the monthly late budget for ``period`` and re-charge that month's records."""

        period = month_start(period)
        with self.unit(employee_code) as days:
            LateAllowanceLedger(days.book).reset(employee_code, period=period)
            days.touch(period)
        return days.book.entry(employee_code).remaining_late_allowance

    # Internals

    def _punch(self, value: PunchValue, day: date, field_name: str) -> Optional[datetime]:
        punch = parse_punch(value, self._tz)
        if punch is not None and punch.date() != day:
            raise ValidationError(f"{field_name} {punch.isoformat()} is not on {day.isoformat()}")
        return punch

    def _merge(self, base: AttendanceRecord, update: DayUpdate) -> AttendanceRecord:
        check_in, check_out = base.check_in, base.check_out
        if update.clear_punches:
            check_in = check_out = None
        if update.check_in is not None:
            check_in = self._punch(update.check_in, update.day, "check_in")
        if update.check_out is not None:
            check_out = self._punch(update.check_out, update.day, "check_out")

        signals = base.signals
        if update.names_status:
            signals = StatusSignals(
                absence=bool(update.absence),
                annual_leave=bool(update.annual_leave),
                medical_leave=bool(update.medical_leave),
                official_leave=bool(update.official_leave),
                leave_compensation=require_non_negative_amount(update.leave_compensation, "leave_compensation"),
                appropriate_value=require_non_negative_amount(update.appropriate_value, "appropriate_value"),
            )
            classify(signals, employee_code=update.employee_code)
            if signals.absence:
                check_in = check_out = None
            elif base.annual_leave and not signals.annual_leave:
                # Shift times written by annual leave are not real punches.
                if update.check_in is None:
                    check_in = None
                if update.check_out is None:
                    check_out = None

        return replace(base.with_signals(signals), check_in=check_in, check_out=check_out)

    def _import_employee(self, code: str, rows: Sequence[PunchRow], today: date) -> ImportSummary:
        counts: Counter = Counter()
        by_day: Dict[date, PunchRow] = {}
        for row in rows:
            if row.day is None or row.day > today:
                logger.warning("Skipping import row for %s with invalid day %s", code, row.day)
                counts["failed"] += 1
                continue
            by_day[row.day] = row

        if not by_day:
            return ImportSummary(**counts)

        first, last = min(by_day), max(by_day)
        with self.unit(code) as days:
            days.preload(first, last)
            for day in iter_days(first, last):
                row = by_day.get(day)
                prior = days.current(day)
                if row is None:
                    if prior is None:
                        days.put(AttendanceRecord(employee_code=code, day=day))
                        counts["created"] += 1
                    continue
                if prior is not None and prior.annual_leave:
                    counts["skipped"] += 1
                    continue
                try:
                    days.put(self._from_row(row, prior, days.employee))
                except DomainError as exc:
                    logger.warning("Skipping import row for %s on %s: %s", code, day, exc)
                    counts["failed"] += 1
                    continue
                counts["updated" if prior is not None else "created"] += 1
        return ImportSummary(**counts)

    def _from_row(self, row: PunchRow, prior: Optional[AttendanceRecord], employee: Employee) -> AttendanceRecord:
        base = prior or AttendanceRecord(employee_code=employee.code, day=row.day)
        check_in = self._punch(row.check_in, row.day, "check_in") or base.check_in
        check_out = self._punch(row.check_out, row.day, "check_out") or base.check_out

        appropriate_value = require_non_negative_amount(row.appropriate_value, "appropriate_value")
        if not (row.official_leave or row.leave_compensation or appropriate_value > 0):
            appropriate_value = base.appropriate_value

        signals = StatusSignals(
            official_leave=bool(row.official_leave),
            leave_compensation=leave_compensation_amount(employee) if row.leave_compensation else ZERO,
            appropriate_value=appropriate_value,
        )
        return replace(base.with_signals(signals), check_in=check_in, check_out=check_out)

    def _backfill_employee(self, code: str, start: date, end: date) -> int:
        created = 0
        with self.unit(code) as days:
            days.preload(start, end)
            for day in iter_days(start, end):
                if days.current(day) is None:
                    days.put(AttendanceRecord(employee_code=code, day=day))
                    created += 1
        return created
