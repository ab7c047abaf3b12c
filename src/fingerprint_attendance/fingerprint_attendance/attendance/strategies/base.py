from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import tzinfo

from ...core.enums import DayState
from ...employees.model import Employee
from ...ledgers.late_allowance import LateAllowanceLedger
from ..model import ZERO, AttendanceRecord


@dataclass(frozen=True)
class DayContext:
    employee: Employee
    late_allowance: LateAllowanceLedger
    tz: tzinfo


class DayStrategy(ABC):
    """Strategy Pattern: one class per resolved day state."""

    state: DayState

    @abstractmethod
    def compute(self, record: AttendanceRecord, ctx: DayContext) -> AttendanceRecord:
        raise NotImplementedError


def cleared(record: AttendanceRecord, state: DayState, **overrides) -> AttendanceRecord:
    """Copy of ``record`` in ``state`` with every derived field zeroed and every status off."""

    fields = dict(
        state=state,
        work_hours=0.0,
        overtime=0.0,
        late_minutes=0,
        late_deduction=0.0,
        early_leave_deduction=0.0,
        medical_leave_deduction=0.0,
        appropriate_value_days=0,
        is_single_fingerprint=False,
        late_allowance_consumed=0,
        absence=False,
        annual_leave=False,
        medical_leave=False,
        official_leave=False,
        leave_compensation=ZERO,
        appropriate_value=ZERO,
    )
    fields.update(overrides)
    return replace(record, **fields)
