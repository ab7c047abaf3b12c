import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from src.fingerprint_attendance.fingerprint_attendance.attendance.model import DayUpdate
from src.fingerprint_attendance.fingerprint_attendance.common.datetime_utils import iter_days
from src.fingerprint_attendance.fingerprint_attendance.core.enums import DayState
from src.fingerprint_attendance.fingerprint_attendance.core.exceptions import ValidationError
from src.fingerprint_attendance.fingerprint_attendance.ledgers.late_allowance import LateAllowanceLedger
from tests.conftest import TODAY
from tests.fakes import at, make_service

MARCH = date(2025, 3, 1)
SUNDAY = date(2025, 3, 2)
MONDAY = date(2025, 3, 3)
TUESDAY = date(2025, 3, 4)
WEDNESDAY = date(2025, 3, 5)
FRIDAY = date(2025, 3, 7)


def _lost_connection(entries):
    raise RuntimeError("connection lost")


def test_failed_ledger_write_rolls_back_the_day(service, attendance, employees, monkeypatch):
    monkeypatch.setattr(employees, "save_ledgers", _lost_connection)

    with pytest.raises(RuntimeError):
        service.save_day(DayUpdate("E1", SUNDAY, annual_leave=True))

    assert attendance.all() == []
    assert employees.get_by_code("E1").annual_leave_balance == 21

    monkeypatch.undo()
    service.save_day(DayUpdate("E1", SUNDAY, annual_leave=True))
    assert employees.get_by_code("E1").annual_leave_balance == 20


def test_failed_ledger_write_keeps_the_deleted_day(service, attendance, employees, monkeypatch):
    service.save_day(DayUpdate("E1", SUNDAY, annual_leave=True))
    monkeypatch.setattr(employees, "save_ledgers", _lost_connection)

    with pytest.raises(RuntimeError):
        service.delete_day("E1", SUNDAY)

    assert attendance.find_one("E1", SUNDAY).state == DayState.ANNUAL_LEAVE
    assert employees.get_by_code("E1").annual_leave_balance == 20


def test_second_process_waits_for_the_employee_row(attendance, employees):
    # Two services with their own in-process locks, like the cron job and the web app.
    cron = make_service(attendance, employees, TODAY)
    web = make_service(attendance, employees, TODAY)
    loaded, resume = threading.Event(), threading.Event()
    errors = []

    def reset_allowance():
        with cron.unit("E1") as days:
            LateAllowanceLedger(days.book).reset("E1", period=MARCH)
            loaded.set()
            resume.wait(5)
            days.touch(MARCH)

    def save_annual_leave():
        try:
            web.save_day(DayUpdate("E1", MONDAY, annual_leave=True))
        except Exception as exc:
            errors.append(exc)

    cron_thread = threading.Thread(target=reset_allowance)
    cron_thread.start()
    assert loaded.wait(5)

    web_thread = threading.Thread(target=save_annual_leave)
    web_thread.start()
    web_thread.join(0.2)
    assert web_thread.is_alive()

    resume.set()
    cron_thread.join(5)
    web_thread.join(5)

    assert errors == []
    assert employees.get_by_code("E1").annual_leave_balance == 20
    assert employees.get_by_code("E1").late_allowance_period == MARCH
    assert attendance.find_one("E1", MONDAY).state == DayState.ANNUAL_LEAVE


def test_concurrent_leave_saves_keep_one_balance(attendance, employees):
    services = [make_service(attendance, employees, TODAY) for _ in range(2)]
    days = [d for d in iter_days(MARCH, date(2025, 3, 11)) if d != FRIDAY]

    with ThreadPoolExecutor(max_workers=5) as pool:
        futures = [
            pool.submit(services[i % 2].save_day, DayUpdate("E1", d, annual_leave=True)) for i, d in enumerate(days)
        ]
        for future in futures:
            future.result()

    assert len(days) == 10
    assert employees.get_by_code("E1").annual_leave_balance == 11
    assert [r.state for r in attendance.all()] == [DayState.ANNUAL_LEAVE] * 10


def test_concurrent_late_days_charge_allowance_in_date_order(attendance, employees):
    services = [make_service(attendance, employees, TODAY) for _ in range(2)]
    late_days = [WEDNESDAY, MONDAY, TUESDAY]

    with ThreadPoolExecutor(max_workers=3) as pool:
        futures = [
            pool.submit(services[i % 2].save_day, DayUpdate("E1", d, check_in=at(d, 9, 20), check_out=at(d, 17, 30)))
            for i, d in enumerate(late_days)
        ]
        for future in futures:
            future.result()

    records = attendance.all()
    assert [r.late_minutes for r in records] == [50, 50, 50]
    assert [r.late_allowance_consumed for r in records] == [50, 50, 20]
    assert [r.late_deduction for r in records] == [0, 0, 0.25]
    assert employees.get_by_code("E1").remaining_late_allowance == 0


def test_stored_leave_compensation_survives_salary_removal(service, employees):
    service.save_day(DayUpdate("E1", SUNDAY, leave_compensation=Decimal("400")))
    employees.update(replace(employees.get_by_code("E1"), base_salary=Decimal("0")))

    saved = service.save_day(DayUpdate("E1", MONDAY, check_in=at(MONDAY, 8, 30), check_out=at(MONDAY, 17, 30)))

    assert saved.state == DayState.WORKED
    assert service.get_day("E1", SUNDAY).leave_compensation == Decimal("400.00")
    with pytest.raises(ValidationError):
        service.save_day(DayUpdate("E1", TUESDAY, leave_compensation=Decimal("400")))
    assert service.get_day("E1", TUESDAY) is None
