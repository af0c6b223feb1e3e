from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import error_response, login_required, server_error
from ..container import Container
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        try:
            s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        except AuthenticationError as e:
            return error_response(e)
        except Exception:
            return server_error("System error while logging in")

        session.clear()
        session.permanent = bool(data.get("remember_me"))

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["position"] = s_user.position

        return jsonify({"success": True, "data": _session_dict()})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, "data": _session_dict()})


def _session_dict() -> dict:
    return {
        "user_id": session.get("user_id"),
        "name": session.get("name"),
        "role": session.get("role"),
        "position": session.get("position"),
    }
