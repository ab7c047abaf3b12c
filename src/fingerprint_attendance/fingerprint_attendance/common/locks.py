from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Dict, Iterator


class EmployeeLocks:
    """One mutex per employee code.

    All writes for an employee (records and ledgers) run under its lock;
    different employees proceed in parallel.
    """

    def __init__(self):
        self._guard = Lock()
        self._locks: Dict[str, Lock] = {}

    def _lock_for(self, employee_code: str) -> Lock:
        with self._guard:
            lock = self._locks.get(employee_code)
            if lock is None:
                lock = Lock()
                self._locks[employee_code] = lock
            return lock

    @contextmanager
    def hold(self, employee_code: str) -> Iterator[None]:
        lock = self._lock_for(employee_code)
        with lock:
            yield
