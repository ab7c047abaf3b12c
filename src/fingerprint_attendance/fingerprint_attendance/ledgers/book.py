from __future__ import annotations

from typing import Dict, List

from ..core.exceptions import EmployeeNotFound
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import LedgerEntry


class LedgerBook:
    """Unit of work over employee ledger fields.

    Entries are loaded lazily from the directory, mutated in memory by the
    ledgers and written back only on ``commit``. A unit that raises before
    committing leaves the directory untouched.

    With ``for_update`` employees are read through ``get_for_update``, so the
    rows stay locked until the surrounding transaction ends.
    """

    def __init__(self, employees: EmployeeRepository, *, persistent: bool = True, for_update: bool = False):
        self._employees = employees
        self._persistent = persistent
        self._for_update = for_update
        self._directory: Dict[str, Employee] = {}
        self._entries: Dict[str, LedgerEntry] = {}
        self._loaded: Dict[str, LedgerEntry] = {}

    def employee(self, code: str) -> Employee:
        employee = self._directory.get(code)
        if employee is None:
            load = self._employees.get_for_update if self._for_update else self._employees.get_by_code
            employee = load(code)
            if employee is None:
                raise EmployeeNotFound(f"No employee with code {code}")
            self._directory[code] = employee
        return employee

    def entry(self, code: str) -> LedgerEntry:
        entry = self._entries.get(code)
        if entry is None:
            entry = LedgerEntry.from_employee(self.employee(code))
            self._entries[code] = entry
            self._loaded[code] = entry.copy()
        return entry

    def detached(self) -> "LedgerBook":
        """Scratch copy sharing nothing mutable with this book; never persisted."""
        scratch = LedgerBook(self._employees, persistent=False)
        scratch._directory = dict(self._directory)
        scratch._entries = {code: e.copy() for code, e in self._entries.items()}
        scratch._loaded = {code: e.copy() for code, e in self._entries.items()}
        return scratch

    def changed_entries(self) -> List[LedgerEntry]:
        return [e for code, e in self._entries.items() if e != self._loaded.get(code)]

    def commit(self) -> List[LedgerEntry]:
        if not self._persistent:
            return []
        changed = self.changed_entries()
        if changed:
            self._employees.save_ledgers([e.copy() for e in changed])
            for e in changed:
                self._loaded[e.employee_code] = e.copy()
        return changed
