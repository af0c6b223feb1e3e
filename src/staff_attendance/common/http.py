from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AlreadyCheckedOutError,
    AuthenticationError,
    ConfigurationMissingError,
    DomainError,
    DuplicateCheckInError,
    HolidayBlockedError,
    NoCheckInFoundError,
    NotFoundError,
    OutOfRangeError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = {
    ValidationError: 400,
    AuthenticationError: 401,
    NotFoundError: 404,
    ConfigurationMissingError: 409,
    OutOfRangeError: 422,
    DuplicateCheckInError: 409,
    HolidayBlockedError: 409,
    NoCheckInFoundError: 409,
    AlreadyCheckedOutError: 409,
}


def error_response(exc: DomainError):
    status = _STATUS_BY_ERROR.get(type(exc), 400)
    logger.info("Rejected (%s) %s: %s", status, type(exc).__name__, exc)
    return jsonify({"success": False, "error": type(exc).__name__, "message": str(exc)}), status


def server_error(message: str):
    logger.exception(message)
    return jsonify({"success": False, "message": message}), 500


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def _role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please log in to continue"}), 401
            if session.get("role") != role.value:
                return jsonify({"success": False, "message": "Forbidden"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = _role_required(Role.ADMIN)
staff_required = _role_required(Role.STAFF)
