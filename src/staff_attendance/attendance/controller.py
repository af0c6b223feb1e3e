from __future__ import annotations

from typing import Mapping, Optional

from flask import Flask, jsonify, request, session

from ..common.http import error_response, server_error, staff_required
from ..common.validators import require_float, require_range
from ..container import Container
from ..core.exceptions import DomainError
from .model import AttendanceRecord


def _fmt_dt(value) -> Optional[str]:
    return value.isoformat(timespec="seconds") if value else None


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "staff_id": r.staff_id,
        "date": r.work_date.strftime("%Y-%m-%d"),
        "checkin_time": _fmt_dt(r.check_in_time),
        "checkout_time": _fmt_dt(r.check_out_time),
        "status": r.status.value,
        "status_label": r.status.label,
        "latitude": r.latitude,
        "longitude": r.longitude,
        "selfie_photo": r.selfie_photo,
        "created_at": _fmt_dt(r.created_at),
        "updated_at": _fmt_dt(r.updated_at),
    }


def register(app: Flask, container: Container) -> None:
    def _read_coordinates() -> tuple[Mapping, float, float]:
        """Form (multipart) or JSON body plus its validated coordinates."""
        data = request.form if request.form else (request.get_json(silent=True) or {})
        latitude = require_range(require_float(data.get("latitude"), "latitude"), "latitude", -90, 90)
        longitude = require_range(require_float(data.get("longitude"), "longitude"), "longitude", -180, 180)
        return data, latitude, longitude

    def _selfie_upload():
        upload = request.files.get("selfie")
        return upload if upload is not None and upload.filename else None

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="api_checkin")
    @staff_required
    def api_checkin():
        staff_id = int(session["user_id"])
        stored: Optional[str] = None
        try:
            data, latitude, longitude = _read_coordinates()
            upload = _selfie_upload()
            if upload is not None:
                stored = container.photo_store.store(upload.stream, owner_id=staff_id)
            record = container.attendance_service.check_in(
                staff_id,
                latitude=latitude,
                longitude=longitude,
                selfie_photo=stored or data.get("selfie_photo") or None,
            )
            return jsonify({"success": True, "message": "Check-in recorded", "data": record_to_dict(record)}), 201
        except DomainError as e:
            container.photo_store.discard(stored)
            return error_response(e)
        except Exception:
            container.photo_store.discard(stored)
            return server_error("System error while checking in")

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_checkout")
    @staff_required
    def api_checkout():
        staff_id = int(session["user_id"])
        try:
            data, latitude, longitude = _read_coordinates()
            # Only the check-in selfie is kept; a checkout upload is validated, not stored.
            upload = _selfie_upload()
            if upload is not None:
                container.photo_store.check_image(upload.stream)
            record = container.attendance_service.check_out(
                staff_id, latitude=latitude, longitude=longitude, selfie_photo=data.get("selfie_photo") or None
            )
            return jsonify({"success": True, "message": "Check-out recorded", "data": record_to_dict(record)}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("System error while checking out")

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_my_history")
    @staff_required
    def api_my_history():
        try:
            records = container.recap_service.history(int(session["user_id"]))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "data": [record_to_dict(r) for r in records]})

    @app.route("/api/attendance/today-status", methods=["GET"], endpoint="api_today_status")
    @staff_required
    def api_today_status():
        record = container.attendance_service.get_today_record(int(session["user_id"]))
        return jsonify({"success": True, "data": record_to_dict(record) if record else None})
