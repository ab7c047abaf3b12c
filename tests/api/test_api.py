from dataclasses import replace
from decimal import Decimal

import pytest

from src.fingerprint_attendance.fingerprint_attendance.container import build_services
from src.fingerprint_attendance.fingerprint_attendance.main import create_app
from tests.conftest import TODAY
from tests.fakes import InMemoryAttendance, InMemoryEmployees, InMemoryTransactions, fixed_clock

DAYS = "/api/attendance/days"


@pytest.fixture
def client(monkeypatch, employee):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("AUTO_INIT_DB", "0")
    employees = InMemoryEmployees(employee, replace(employee, code="E2", full_name="Karim Samir", annual_leave_balance=0))
    attendance = InMemoryAttendance()
    container = build_services(
        attendance_repo=attendance,
        employees_repo=employees,
        transactions=InMemoryTransactions(attendance, employees),
        timezone="Africa/Cairo",
        bulk_workers=2,
        clock=fixed_clock(TODAY),
    )
    app = create_app(container=container)
    return app.test_client()


def _save(client, **body):
    return client.post(DAYS, json={"employee_code": "E1", "date": "2025-03-03", **body})


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_save_and_read_day(client):
    resp = _save(client, check_in="2025-03-03T09:30:00", check_out="2025-03-03T17:30:00")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["state"] == "WORKED"
    assert body["late_minutes"] == 60
    assert body["late_allowance_consumed"] == 60
    assert body["check_in"].startswith("2025-03-03T09:30:00")
    assert body["employee_name"] == "Mona Adel"

    one = client.get(f"{DAYS}/E1/2025-03-03")
    assert one.status_code == 200
    assert one.get_json()["id"] == body["id"]

    listed = client.get(DAYS, query_string={"code": "E1", "start": "2025-03-01", "end": "2025-03-31"})
    assert [d["date"] for d in listed.get_json()] == ["2025-03-03"]


def test_delete_day(client):
    _save(client, medical_leave=True)

    assert client.delete(f"{DAYS}/E1/2025-03-03").status_code == 204
    assert client.get(f"{DAYS}/E1/2025-03-03").status_code == 404
    missing = client.delete(f"{DAYS}/E1/2025-03-03")
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "NotFound"


@pytest.mark.parametrize(
    "body, status, error",
    [
        ({"date": "2025-04-01"}, 400, "ValidationError"),
        ({"date": "03/03/2025"}, 400, "ValidationError"),
        ({"employee_code": "GHOST"}, 404, "EmployeeNotFound"),
        ({"employee_code": "E2", "annual_leave": True}, 409, "InsufficientLeaveBalance"),
        ({"annual_leave": True, "official_leave": True}, 400, "InvalidStatusCombination"),
        ({"appropriate_value": -5}, 400, "ValidationError"),
        ({"annual_leave": "false"}, 400, "ValidationError"),
        ({"clear_punches": 1}, 400, "ValidationError"),
    ],
)
def test_save_day_errors(client, body, status, error):
    resp = _save(client, **body)

    assert resp.status_code == status
    assert resp.get_json()["error"] == error


def test_non_json_body_is_rejected(client):
    resp = client.post(DAYS, data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_list_requires_code(client):
    assert client.get(DAYS, query_string={"start": "2025-03-01", "end": "2025-03-31"}).status_code == 400


def test_import_counts_rows(client):
    resp = client.post(
        "/api/attendance/import",
        json={
            "rows": [
                {"employee_code": "E1", "date": "2025-03-02", "check_in": "2025-03-02T08:00:00", "check_out": "2025-03-02T17:30:00"},
                {"employee_code": "E1", "date": "not-a-date", "check_in": "08:00"},
                {"employee_code": "GHOST", "date": "2025-03-02"},
            ]
        },
    )

    assert resp.status_code == 200
    assert resp.get_json() == {"created": 1, "updated": 0, "skipped": 0, "failed": 2}


def test_import_requires_rows_list(client):
    assert client.post("/api/attendance/import", json={"rows": "nope"}).status_code == 400


def test_leave_batch(client):
    resp = client.post(
        "/api/leaves/annual",
        json={"date_from": "2025-03-02", "date_to": "2025-03-08", "employee_code": "E1"},
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert (body["kind"], body["applied"], body["errors"]) == ("annual", 6, {})
    day = client.get(f"{DAYS}/E1/2025-03-04").get_json()
    assert day["state"] == "ANNUAL_LEAVE"
    assert day["annual_leave_balance"] == 15


def test_leave_batch_reports_employee_errors(client):
    resp = client.post("/api/leaves/annual", json={"date_from": "2025-03-03", "date_to": "2025-03-03"})

    body = resp.get_json()
    assert body["applied"] == 1
    assert list(body["errors"]) == ["E2"]


def test_leave_batch_rejects_unknown_kind(client):
    resp = client.post("/api/leaves/holiday", json={"date_from": "2025-03-03", "date_to": "2025-03-03"})
    assert resp.status_code == 400


def test_appropriate_value_batch_amount(client):
    resp = client.post(
        "/api/leaves/appropriate_value",
        json={"date_from": "2025-03-03", "date_to": "2025-03-03", "employee_code": "E1", "amount": "120"},
    )

    assert resp.get_json()["applied"] == 1
    assert client.get(f"{DAYS}/E1/2025-03-03").get_json()["appropriate_value"] == "120.00"


def test_monthly_reset_job(client):
    resp = client.post("/api/jobs/monthly-reset", json={"today": "2025-03-01"})

    assert resp.status_code == 200
    assert resp.get_json() == {"period": "2025-03-01", "reset": 2, "backfilled": 56, "errors": {}}


def test_summary_report(client):
    _save(client, check_in="2025-03-03T08:30:00", check_out="2025-03-03T18:30:00")
    _save(client, date="2025-03-04", leave_compensation="400")

    resp = client.get("/api/reports/summary", query_string={"start": "2025-03-01", "end": "2025-03-31", "code": "E1"})

    (summary,) = resp.get_json()
    assert summary["work_days"] == 1
    assert summary["total_overtime"] == 1.0
    assert summary["leave_compensation_total"] == "400.00"
    assert Decimal(summary["leave_compensation_total"]) == Decimal("400")


def test_import_fails_rows_with_non_boolean_flags(client):
    resp = client.post(
        "/api/attendance/import",
        json={
            "rows": [
                {"employee_code": "E1", "date": "2025-03-02", "official_leave": "yes"},
                {"employee_code": "E1", "date": "2025-03-03", "official_leave": True},
            ]
        },
    )

    assert resp.get_json() == {"created": 1, "updated": 0, "skipped": 0, "failed": 1}
    assert client.get(f"{DAYS}/E1/2025-03-02").status_code == 404
