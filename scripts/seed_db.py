"""Seed the default geofence and the demo admin/staff accounts."""

from __future__ import annotations

import argparse
import importlib

from dotenv import load_dotenv

from staff_attendance.config import get_settings_module
from staff_attendance.database.bootstrap import apply_seed_sql, ensure_demo_users
from staff_attendance.database.connection import DBConfig


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--admin-password", default="admin123")
    parser.add_argument("--staff-password", default="staff123")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config)
    ensure_demo_users(db_config, admin_password=args.admin_password, staff_password=args.staff_password)

    print(f"OK: Seeded database -> {DBConfig.from_dict(db_config).describe()}")


if __name__ == "__main__":
    main()
