from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.leave_batch import LeaveBatchService
from .attendance.monthly_reset import MonthlyResetJob
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository, TransactionManager
from .attendance.service import AttendanceService
from .common.datetime_utils import get_zone
from .common.locks import EmployeeLocks
from .core.constants import DEFAULT_BULK_WORKERS, DEFAULT_TIMEZONE
from .database.connection import DatabaseConnection, DBConfig
from .database.mysql_base import MySQLTransactionManager
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .payroll.service import AttendanceSummaryService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository

    attendance_service: AttendanceService
    leave_batch_service: LeaveBatchService
    monthly_reset_job: MonthlyResetJob
    summary_service: AttendanceSummaryService


def build_services(
    *,
    attendance_repo: AttendanceRepository,
    employees_repo: EmployeeRepository,
    transactions: TransactionManager,
    timezone: str = DEFAULT_TIMEZONE,
    bulk_workers: int = DEFAULT_BULK_WORKERS,
    clock: Optional[Callable[[], datetime]] = None,
) -> Container:
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        transactions=transactions,
        locks=EmployeeLocks(),
        tz=get_zone(timezone),
        clock=clock,
        bulk_workers=bulk_workers,
    )
    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
        leave_batch_service=LeaveBatchService(attendance_service, employees_repo),
        monthly_reset_job=MonthlyResetJob(attendance_service, employees_repo),
        summary_service=AttendanceSummaryService(attendance_repo),
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    bulk_workers: int = DEFAULT_BULK_WORKERS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_services(
        attendance_repo=MySQLAttendanceRepository(conn, tz=get_zone(timezone)),
        employees_repo=MySQLEmployeeRepository(conn),
        transactions=MySQLTransactionManager(conn),
        timezone=timezone,
        bulk_workers=bulk_workers,
    )
