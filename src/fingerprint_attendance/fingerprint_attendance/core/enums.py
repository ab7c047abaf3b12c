from __future__ import annotations

from enum import Enum


class StatusCategory(str, Enum):
    """The single status active on a record (NONE = classify from punches/calendar)."""

    NONE = "NONE"
    ABSENCE = "ABSENCE"
    ANNUAL_LEAVE = "ANNUAL_LEAVE"
    MEDICAL_LEAVE = "MEDICAL_LEAVE"
    OFFICIAL_LEAVE = "OFFICIAL_LEAVE"
    LEAVE_COMPENSATION = "LEAVE_COMPENSATION"
    APPROPRIATE_VALUE = "APPROPRIATE_VALUE"


class DayState(str, Enum):
    """Resolved state of an attendance day, persisted with the record."""

    LEAVE_COMPENSATION = "LEAVE_COMPENSATION"
    ANNUAL_LEAVE = "ANNUAL_LEAVE"
    APPROPRIATE_VALUE = "APPROPRIATE_VALUE"
    OFFICIAL_LEAVE = "OFFICIAL_LEAVE"
    MEDICAL_LEAVE = "MEDICAL_LEAVE"
    WEEKLY_OFF = "WEEKLY_OFF"
    SINGLE_PUNCH = "SINGLE_PUNCH"
    ABSENT = "ABSENT"
    WORKED = "WORKED"
    INVALID_PUNCHES = "INVALID_PUNCHES"


class LeaveKind(str, Enum):
    """Leave declarations accepted by the batch endpoint."""

    ANNUAL = "annual"
    MEDICAL = "medical"
    OFFICIAL = "official"
    LEAVE_COMPENSATION = "leave_compensation"
    APPROPRIATE_VALUE = "appropriate_value"
