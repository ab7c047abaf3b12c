from __future__ import annotations

import logging

from .book import LedgerBook

logger = logging.getLogger(__name__)


class AnnualLeaveLedger:
    """Per-employee balance of annual-leave days.

    One call per transition edge of a record's annual-leave flag. Restoring
    is uncapped: the balance may exceed the nominal entitlement.
    """

    def __init__(self, book: LedgerBook):
        self._book = book

    def balance(self, employee_code: str) -> int:
        return self._book.entry(employee_code).annual_leave_balance

    def decrement(self, employee_code: str) -> int:
        entry = self._book.entry(employee_code)
        entry.annual_leave_balance = max(entry.annual_leave_balance - 1, 0)
        logger.info("Annual leave taken for %s, balance=%s", employee_code, entry.annual_leave_balance)
        return entry.annual_leave_balance

    def restore(self, employee_code: str) -> int:
        entry = self._book.entry(employee_code)
        entry.annual_leave_balance += 1
        logger.info("Annual leave day restored for %s, balance=%s", employee_code, entry.annual_leave_balance)
        return entry.annual_leave_balance


class OfficialLeaveCounter:
    """Cumulative official-leave days, moved on transition edges only."""

    def __init__(self, book: LedgerBook):
        self._book = book

    def total(self, employee_code: str) -> int:
        return self._book.entry(employee_code).total_official_leave_days

    def increment(self, employee_code: str) -> int:
        entry = self._book.entry(employee_code)
        entry.total_official_leave_days += 1
        return entry.total_official_leave_days

    def decrement(self, employee_code: str) -> int:
        entry = self._book.entry(employee_code)
        entry.total_official_leave_days = max(entry.total_official_leave_days - 1, 0)
        return entry.total_official_leave_days
