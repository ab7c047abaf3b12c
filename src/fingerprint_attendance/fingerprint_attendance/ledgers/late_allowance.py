from __future__ import annotations

from datetime import date
from typing import Optional

from .book import LedgerBook


class LateAllowanceLedger:
    """Monthly budget of late minutes excused without deduction.

    ``consume`` never takes more than what remains; the budget is refilled
    by ``reset`` (monthly trigger, or a month re-derivation replaying records
    in date order).
    """

    def __init__(self, book: LedgerBook):
        self._book = book

    def remaining(self, employee_code: str) -> int:
        return self._book.entry(employee_code).remaining_late_allowance

    def period(self, employee_code: str) -> Optional[date]:
        return self._book.entry(employee_code).late_allowance_period

    def consume(self, employee_code: str, minutes: int) -> int:
        entry = self._book.entry(employee_code)
        consumed = max(min(int(minutes), entry.remaining_late_allowance), 0)
        entry.remaining_late_allowance -= consumed
        return consumed

    def reset(self, employee_code: str, *, period: Optional[date] = None) -> int:
        entry = self._book.entry(employee_code)
        entry.remaining_late_allowance = entry.monthly_late_allowance
        if period is not None:
            entry.late_allowance_period = period
        return entry.remaining_late_allowance
