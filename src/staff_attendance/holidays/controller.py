from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import admin_required, error_response
from ..container import Container
from ..core.exceptions import DomainError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/holidays", methods=["GET"], endpoint="admin_holidays")
    @admin_required
    def admin_holidays():
        data = [
            {"id": h.holiday_id, "date": h.holiday_date.strftime("%Y-%m-%d"), "description": h.description}
            for h in container.holiday_service.list_holidays()
        ]
        return jsonify({"success": True, "data": data})

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="admin_holidays_create")
    @admin_required
    def admin_holidays_create():
        data = request.get_json(silent=True) or {}
        try:
            try:
                holiday_date = parse_iso_date(str(data.get("date") or ""))
            except ValueError:
                raise ValidationError("date must be YYYY-MM-DD")
            holiday_id = container.holiday_service.create_holiday(
                holiday_date=holiday_date,
                description=str(data.get("description") or ""),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "data": {"id": holiday_id}}), 201

    @app.route("/api/admin/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="admin_holidays_delete")
    @admin_required
    def admin_holidays_delete(holiday_id: int):
        try:
            container.holiday_service.delete_holiday(holiday_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True})
