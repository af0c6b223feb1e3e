from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, error_response
from ..container import Container
from ..core.exceptions import DomainError
from .model import GeofenceSetting


def _to_dict(s: GeofenceSetting) -> dict:
    return {
        "school_latitude": s.school_latitude,
        "school_longitude": s.school_longitude,
        "tolerance_radius": s.tolerance_radius,
        "updated_at": s.updated_at.isoformat(timespec="seconds") if s.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/geofence", methods=["GET"], endpoint="admin_geofence_get")
    @admin_required
    def admin_geofence_get():
        setting = container.geofence_service.get_settings()
        return jsonify({"success": True, "data": _to_dict(setting) if setting else None})

    @app.route("/api/admin/geofence", methods=["PUT"], endpoint="admin_geofence_put")
    @admin_required
    def admin_geofence_put():
        data = request.get_json(silent=True) or {}
        try:
            setting = container.geofence_service.update_settings(
                school_latitude=data.get("school_latitude"),
                school_longitude=data.get("school_longitude"),
                tolerance_radius=data.get("tolerance_radius"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "data": _to_dict(setting)})
