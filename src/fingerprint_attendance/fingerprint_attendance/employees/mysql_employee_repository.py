from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..ledgers.model import LedgerEntry
from .model import Employee
from .repository import EmployeeRepository

_SELECT = """
    SELECT code, full_name, work_days_per_week, work_hours_per_day,
           check_in_hour, check_in_minute, check_out_hour, check_out_minute,
           base_salary, monthly_late_allowance, remaining_late_allowance, late_allowance_period,
           annual_leave_balance, custom_annual_leave, medical_leave_deduction,
           total_official_leave_days, advances
    FROM employees
"""


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_code(self, code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE code=%s", (code,))
            r = fetchone(cur)
            return self._to_employee(r) if r else None

    def get_for_update(self, code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE code=%s FOR UPDATE", (code,))
            r = fetchone(cur)
            return self._to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY code ASC")
            return [self._to_employee(r) for r in fetchall(cur)]

    def save_ledgers(self, entries: Sequence[LedgerEntry]) -> None:
        if not entries:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                UPDATE employees
                SET monthly_late_allowance=%s, remaining_late_allowance=%s, late_allowance_period=%s,
                    annual_leave_balance=%s, total_official_leave_days=%s
                WHERE code=%s
                """,
                [
                    (
                        e.monthly_late_allowance,
                        e.remaining_late_allowance,
                        e.late_allowance_period,
                        e.annual_leave_balance,
                        e.total_official_leave_days,
                        e.employee_code,
                    )
                    for e in entries
                ],
            )

    @staticmethod
    def _to_employee(r: Dict[str, Any]) -> Employee:
        return Employee(
            code=r["code"],
            full_name=r["full_name"],
            work_days_per_week=int(r["work_days_per_week"]),
            work_hours_per_day=float(r["work_hours_per_day"]),
            check_in_hour=int(r["check_in_hour"]),
            check_in_minute=int(r["check_in_minute"]),
            check_out_hour=int(r["check_out_hour"]),
            check_out_minute=int(r["check_out_minute"]),
            base_salary=Decimal(str(r.get("base_salary") or 0)),
            monthly_late_allowance=int(r["monthly_late_allowance"]),
            remaining_late_allowance=int(r["remaining_late_allowance"]),
            late_allowance_period=r.get("late_allowance_period"),
            annual_leave_balance=int(r["annual_leave_balance"]),
            custom_annual_leave=int(r.get("custom_annual_leave") or 0),
            medical_leave_deduction=float(r["medical_leave_deduction"]),
            total_official_leave_days=int(r.get("total_official_leave_days") or 0),
            advances=Decimal(str(r.get("advances") or 0)),
        )
