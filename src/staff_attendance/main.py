from __future__ import annotations

import importlib
import logging
import os
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, send_from_directory

from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_LIVE_WINDOW_MINUTES, DEFAULT_TIMEZONE
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .geofence.controller import register as register_geofence
from .holidays.controller import register as register_holidays
from .recap.controller import register as register_recap
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    """Build the Flask app.

    When ``container`` is given (tests), no database bootstrap is attempted.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = 8 * 1024 * 1024
    app.permanent_session_lifetime = timedelta(days=7)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config)
            ensure_demo_users(db_config)

        container = build_container(
            db_config=db_config,
            upload_dir=getattr(settings, "UPLOAD_DIR", "uploads"),
            timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
            live_window_minutes=int(getattr(settings, "LIVE_WINDOW_MINUTES", DEFAULT_LIVE_WINDOW_MINUTES)),
        )

    app.extensions["staff_attendance"] = container

    register_users(app, container)
    register_attendance(app, container)
    register_recap(app, container)
    register_geofence(app, container)
    register_holidays(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"success": True, "status": "ok"})

    @app.route("/uploads/<path:filename>", methods=["GET"], endpoint="uploads")
    def uploads(filename: str):
        return send_from_directory(container.photo_store.root.resolve(), filename)

    return app


def run() -> None:
    app = create_app()
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "5000")), debug=app.config["DEBUG"])


if __name__ == "__main__":
    run()
