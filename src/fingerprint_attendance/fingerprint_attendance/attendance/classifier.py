from __future__ import annotations

from ..core.enums import StatusCategory
from ..core.exceptions import InvalidStatusCombination
from .model import StatusSignals


def active_categories(signals: StatusSignals) -> list[StatusCategory]:
    flags = (
        (signals.absence, StatusCategory.ABSENCE),
        (signals.annual_leave, StatusCategory.ANNUAL_LEAVE),
        (signals.medical_leave, StatusCategory.MEDICAL_LEAVE),
        (signals.official_leave, StatusCategory.OFFICIAL_LEAVE),
        ((signals.leave_compensation or 0) > 0, StatusCategory.LEAVE_COMPENSATION),
        ((signals.appropriate_value or 0) > 0, StatusCategory.APPROPRIATE_VALUE),
    )
    return [category for active, category in flags if active]


def classify(signals: StatusSignals, *, employee_code: str = "") -> StatusCategory:
    """Return the single active status, or NONE when all are off.

    Raises InvalidStatusCombination when more than one is active. A monetary
    status counts as active when its amount is > 0.
    """

    active = active_categories(signals)
    if len(active) > 1:
        names = ", ".join(c.value for c in active)
        raise InvalidStatusCombination(f"Only one status may be set for {employee_code or 'a day'} (got {names})")
    return active[0] if active else StatusCategory.NONE
