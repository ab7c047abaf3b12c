from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_not_future(day: date, today: date, field_name: str = "Date") -> date:
    if day is None:
        raise ValidationError(f"{field_name} is required")
    if day > today:
        raise ValidationError(f"{field_name} {day.isoformat()} is in the future")
    return day


def require_date_range(start: date, end: date) -> None:
    if end < start:
        raise ValidationError("End date must be on or after start date")


def require_non_negative_amount(value, field_name: str) -> Decimal:
    try:
        amount = Decimal(str(value if value is not None else 0))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if amount < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return amount
