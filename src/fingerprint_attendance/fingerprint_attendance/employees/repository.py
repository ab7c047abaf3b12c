from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..ledgers.model import LedgerEntry
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for the employee directory.

    Note (DIP): services depend on this interface, never on a concrete database.
    Writes are limited to the ledger fields.
    """

    def get_by_code(self, code: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_for_update(self, code: str) -> Optional[Employee]:
        """Read the employee and hold its row until the current transaction ends."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def save_ledgers(self, entries: Sequence[LedgerEntry]) -> None:
        raise NotImplementedError
