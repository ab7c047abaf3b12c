from __future__ import annotations

from datetime import date
from typing import ContextManager, Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Record store keyed by (employee_code, day), one record per employee per day."""

    def find_one(self, employee_code: str, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert or replace the record for its (employee_code, day); returns it with its id."""

        raise NotImplementedError

    def delete(self, record: AttendanceRecord) -> bool:
        raise NotImplementedError

    def list_for_employee(self, employee_code: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records within [start, end], ordered by day."""

        raise NotImplementedError

    def list_range(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError


class TransactionManager(Protocol):
    """Scope in which one employee's record and ledger writes commit or roll back together."""

    def transaction(self, employee_code: str) -> ContextManager[None]:
        raise NotImplementedError
