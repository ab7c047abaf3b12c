from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty, require_non_negative_amount
from ..core.exceptions import ValidationError
from ..container import Container
from .model import AttendanceRecord, DayUpdate, PunchRow


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "employee_code": r.employee_code,
        "employee_name": r.employee_name,
        "date": r.day.isoformat(),
        "state": r.state.value if r.state else None,
        "check_in": r.check_in.isoformat() if r.check_in else None,
        "check_out": r.check_out.isoformat() if r.check_out else None,
        "work_hours": r.work_hours,
        "overtime": r.overtime,
        "late_minutes": r.late_minutes,
        "late_deduction": r.late_deduction,
        "early_leave_deduction": r.early_leave_deduction,
        "medical_leave_deduction": r.medical_leave_deduction,
        "is_single_fingerprint": r.is_single_fingerprint,
        "late_allowance_consumed": r.late_allowance_consumed,
        "absence": r.absence,
        "annual_leave": r.annual_leave,
        "medical_leave": r.medical_leave,
        "official_leave": r.official_leave,
        "leave_compensation": str(r.leave_compensation),
        "appropriate_value": str(r.appropriate_value),
        "appropriate_value_days": r.appropriate_value_days,
        "work_days_per_week": r.work_days_per_week,
        "annual_leave_balance": r.annual_leave_balance,
        "custom_annual_leave": r.custom_annual_leave,
        "advances": str(r.advances),
    }


def _json_body() -> Mapping[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _date(value: Any, field_name: str) -> date:
    if not value:
        raise ValidationError(f"{field_name} is required")
    return parse_iso_date(value)


def _optional_bool(payload: Mapping[str, Any], key: str) -> Optional[bool]:
    value = payload.get(key)
    if value is not None and not isinstance(value, bool):
        raise ValidationError(f"{key} must be true or false")
    return value


def _flag(payload: Mapping[str, Any], key: str) -> bool:
    return bool(_optional_bool(payload, key))


def _optional_amount(payload: Mapping[str, Any], key: str) -> Optional[Decimal]:
    return require_non_negative_amount(payload[key], key) if payload.get(key) is not None else None


def _day_update(payload: Mapping[str, Any]) -> DayUpdate:
    return DayUpdate(
        employee_code=require_non_empty(payload.get("employee_code"), "employee_code"),
        day=_date(payload.get("date"), "date"),
        check_in=payload.get("check_in"),
        check_out=payload.get("check_out"),
        clear_punches=_flag(payload, "clear_punches"),
        absence=_optional_bool(payload, "absence"),
        annual_leave=_optional_bool(payload, "annual_leave"),
        medical_leave=_optional_bool(payload, "medical_leave"),
        official_leave=_optional_bool(payload, "official_leave"),
        leave_compensation=_optional_amount(payload, "leave_compensation"),
        appropriate_value=_optional_amount(payload, "appropriate_value"),
    )


def _punch_row(item: Mapping[str, Any]) -> PunchRow:
    # Unreadable rows are handed over with day=None and counted as failed.
    try:
        day = parse_iso_date(item.get("date"))
        official_leave = _flag(item, "official_leave")
        leave_compensation = _flag(item, "leave_compensation")
    except ValidationError:
        day, official_leave, leave_compensation = None, False, False
    return PunchRow(
        employee_code=str(item.get("employee_code") or "").strip(),
        day=day,
        check_in=item.get("check_in"),
        check_out=item.get("check_out"),
        official_leave=official_leave,
        leave_compensation=leave_compensation,
        appropriate_value=item.get("appropriate_value"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/attendance/days", methods=["POST"])
    def save_day():
        record = container.attendance_service.save_day(_day_update(_json_body()))
        return jsonify(record_to_dict(record))

    @app.route("/api/attendance/days", methods=["GET"])
    def list_days():
        code = require_non_empty(request.args.get("code"), "code")
        start = _date(request.args.get("start"), "start")
        end = _date(request.args.get("end"), "end")
        records = container.attendance_service.list_days(code, start, end)
        return jsonify([record_to_dict(r) for r in records])

    @app.route("/api/attendance/days/<code>/<day>", methods=["GET"])
    def get_day(code: str, day: str):
        record = container.attendance_service.get_day(code, parse_iso_date(day))
        if record is None:
            return jsonify({"error": "NotFound", "message": f"No record for {code} on {day}"}), 404
        return jsonify(record_to_dict(record))

    @app.route("/api/attendance/days/<code>/<day>", methods=["DELETE"])
    def delete_day(code: str, day: str):
        if not container.attendance_service.delete_day(code, parse_iso_date(day)):
            return jsonify({"error": "NotFound", "message": f"No record for {code} on {day}"}), 404
        return "", 204

    @app.route("/api/attendance/import", methods=["POST"])
    def import_punches():
        items = _json_body().get("rows")
        if not isinstance(items, list):
            raise ValidationError("rows must be a list")
        summary = container.attendance_service.import_punches(_punch_row(i) for i in items if isinstance(i, dict))
        return jsonify(summary.as_dict())

    @app.route("/api/leaves/<kind>", methods=["POST"])
    def apply_leave(kind: str):
        payload = _json_body()
        result = container.leave_batch_service.apply(
            kind,
            _date(payload.get("date_from"), "date_from"),
            _date(payload.get("date_to"), "date_to"),
            employee_code=payload.get("employee_code") or None,
            amount=payload.get("amount"),
        )
        return jsonify(
            {
                "kind": result.kind.value,
                "date_from": result.date_from.isoformat(),
                "date_to": result.date_to.isoformat(),
                "applied": result.applied,
                "skipped": result.skipped,
                "employees": [
                    {"employee_code": r.employee_code, "applied": r.applied, "skipped": r.skipped}
                    for r in result.results
                ],
                "errors": result.errors,
            }
        )

    @app.route("/api/jobs/monthly-reset", methods=["POST"])
    def monthly_reset():
        payload = request.get_json(silent=True) or {}
        today = _date(payload["today"], "today") if payload.get("today") else None
        report = container.monthly_reset_job.run(today)
        return jsonify(
            {
                "period": report.period.isoformat(),
                "reset": report.reset,
                "backfilled": report.backfilled,
                "errors": report.errors,
            }
        )

    @app.route("/api/reports/summary", methods=["GET"])
    def summary():
        start = _date(request.args.get("start"), "start")
        end = _date(request.args.get("end"), "end")
        rows = container.summary_service.build(start, end, employee_code=request.args.get("code") or None)
        return jsonify([s.as_dict() for s in rows])
