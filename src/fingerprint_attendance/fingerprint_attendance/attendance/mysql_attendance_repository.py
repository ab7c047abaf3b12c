from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import get_zone, to_local
from ..core.enums import DayState
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "employee_code",
    "work_date",
    "check_in",
    "check_out",
    "absence",
    "annual_leave",
    "medical_leave",
    "official_leave",
    "leave_compensation",
    "appropriate_value",
    "state",
    "work_hours",
    "overtime",
    "late_minutes",
    "late_deduction",
    "early_leave_deduction",
    "medical_leave_deduction",
    "appropriate_value_days",
    "is_single_fingerprint",
    "late_allowance_consumed",
    "employee_name",
    "work_days_per_week",
    "annual_leave_balance",
    "custom_annual_leave",
    "advances",
)

_SELECT = f"SELECT record_id, {', '.join(_COLUMNS)} FROM attendance_records"


class MySQLAttendanceRepository(AttendanceRepository):
    """Punch timestamps are stored as local wall-clock DATETIMEs."""

    def __init__(self, conn_factory: DatabaseConnection, *, tz: Optional[tzinfo] = None):
        self._conn_factory = conn_factory
        self._tz = tz or get_zone()

    def find_one(self, employee_code: str, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE employee_code=%s AND work_date=%s", (employee_code, day))
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        values = self._to_row(record)
        placeholders = ", ".join(["%s"] * len(_COLUMNS))
        updates = ", ".join(f"{c}=VALUES({c})" for c in _COLUMNS if c not in ("employee_code", "work_date"))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance_records ({', '.join(_COLUMNS)})
                VALUES ({placeholders})
                ON DUPLICATE KEY UPDATE record_id=LAST_INSERT_ID(record_id), {updates}
                """,
                values,
            )
            return replace(record, record_id=int(cur.lastrowid))

    def delete(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_records WHERE employee_code=%s AND work_date=%s",
                (record.employee_code, record.day),
            )
            return cur.rowcount > 0

    def list_for_employee(self, employee_code: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE employee_code=%s AND work_date BETWEEN %s AND %s ORDER BY work_date ASC",
                (employee_code, start, end),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def list_range(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE work_date BETWEEN %s AND %s ORDER BY employee_code ASC, work_date ASC",
                (start, end),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def _wall_clock(self, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        return to_local(value, self._tz).replace(tzinfo=None)

    def _punch(self, value: Optional[datetime]) -> Optional[datetime]:
        return to_local(value, self._tz) if value is not None else None

    def _to_row(self, record: AttendanceRecord) -> tuple:
        return (
            record.employee_code,
            record.day,
            self._wall_clock(record.check_in),
            self._wall_clock(record.check_out),
            int(record.absence),
            int(record.annual_leave),
            int(record.medical_leave),
            int(record.official_leave),
            record.leave_compensation,
            record.appropriate_value,
            record.state.value if record.state else None,
            record.work_hours,
            record.overtime,
            record.late_minutes,
            record.late_deduction,
            record.early_leave_deduction,
            record.medical_leave_deduction,
            record.appropriate_value_days,
            int(record.is_single_fingerprint),
            record.late_allowance_consumed,
            record.employee_name,
            record.work_days_per_week,
            record.annual_leave_balance,
            record.custom_annual_leave,
            record.advances,
        )

    def _to_record(self, r: Dict[str, Any]) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=int(r["record_id"]),
            employee_code=r["employee_code"],
            day=r["work_date"],
            check_in=self._punch(r.get("check_in")),
            check_out=self._punch(r.get("check_out")),
            absence=bool(r["absence"]),
            annual_leave=bool(r["annual_leave"]),
            medical_leave=bool(r["medical_leave"]),
            official_leave=bool(r["official_leave"]),
            leave_compensation=Decimal(str(r.get("leave_compensation") or 0)),
            appropriate_value=Decimal(str(r.get("appropriate_value") or 0)),
            state=DayState(r["state"]) if r.get("state") else None,
            work_hours=float(r.get("work_hours") or 0),
            overtime=float(r.get("overtime") or 0),
            late_minutes=int(r.get("late_minutes") or 0),
            late_deduction=float(r.get("late_deduction") or 0),
            early_leave_deduction=float(r.get("early_leave_deduction") or 0),
            medical_leave_deduction=float(r.get("medical_leave_deduction") or 0),
            appropriate_value_days=int(r.get("appropriate_value_days") or 0),
            is_single_fingerprint=bool(r.get("is_single_fingerprint")),
            late_allowance_consumed=int(r.get("late_allowance_consumed") or 0),
            employee_name=r.get("employee_name") or "",
            work_days_per_week=int(r["work_days_per_week"]),
            annual_leave_balance=int(r["annual_leave_balance"]),
            custom_annual_leave=int(r.get("custom_annual_leave") or 0),
            advances=Decimal(str(r.get("advances") or 0)),
        )
