from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..attendance.controller import record_to_dict
from ..common.datetime_utils import parse_iso_date
from ..common.http import admin_required, error_response
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError, ValidationError
from .model import RecapFilter
from .service import CSV_FIELDS


def _parse_filter(args) -> RecapFilter:
    def _date(name: str):
        value = (args.get(name) or "").strip()
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"{name} must be YYYY-MM-DD")

    staff_s = (args.get("staff_id") or "").strip()
    if staff_s and not staff_s.isdigit():
        raise ValidationError("staff_id must be an integer")

    status_s = (args.get("status") or "").strip().upper()
    try:
        status = AttendanceStatus(status_s) if status_s else None
    except ValueError:
        raise ValidationError("status must be one of ON_TIME, LATE, ABSENT")

    return RecapFilter(
        start_date=_date("start_date"),
        end_date=_date("end_date"),
        staff_id=int(staff_s) if staff_s else None,
        status=status,
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/staff/<int:staff_id>/attendance", methods=["GET"], endpoint="admin_staff_history")
    @admin_required
    def admin_staff_history(staff_id: int):
        try:
            records = container.recap_service.history(staff_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "data": [record_to_dict(r) for r in records]})

    @app.route("/api/admin/attendance/recap", methods=["GET"], endpoint="admin_recap")
    @admin_required
    def admin_recap():
        try:
            rows = container.recap_service.recapitulation(_parse_filter(request.args))
        except DomainError as e:
            return error_response(e)
        data = [{**record_to_dict(r.record), "staff_name": r.full_name, "username": r.username} for r in rows]
        return jsonify({"success": True, "data": data})

    @app.route("/api/admin/attendance/recap.csv", methods=["GET"], endpoint="admin_recap_csv")
    @admin_required
    def admin_recap_csv():
        try:
            recap_filter = _parse_filter(request.args)
        except DomainError as e:
            return error_response(e)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in container.recap_service.build_export_rows(recap_filter):
            writer.writerow(row)

        start = recap_filter.start_date.strftime("%Y%m%d") if recap_filter.start_date else "all"
        end = recap_filter.end_date.strftime("%Y%m%d") if recap_filter.end_date else "all"
        filename = f"rekap_presensi_{start}_{end}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/attendance/today", methods=["GET"], endpoint="admin_today")
    @admin_required
    def admin_today():
        records = container.recap_service.today()
        return jsonify({"success": True, "data": [record_to_dict(r) for r in records]})

    @app.route("/api/admin/attendance/live", methods=["GET"], endpoint="admin_live")
    @admin_required
    def admin_live():
        minutes_s = (request.args.get("minutes") or "").strip()
        if minutes_s and not minutes_s.isdigit():
            return error_response(ValidationError("minutes must be a positive integer"))

        items = container.recap_service.live_activity(int(minutes_s) if minutes_s else None)
        data = [
            {
                "tendik_name": a.staff_name,
                "action": a.action.value,
                "time": a.time.isoformat(timespec="seconds"),
                "photo": a.photo,
            }
            for a in items
        ]
        return jsonify({"success": True, "data": data})
