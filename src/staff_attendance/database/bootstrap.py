"""Schema/seed helpers used by `create_app` (AUTO_INIT_DB / AUTO_SEED_DB) and scripts/."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Mapping, Optional

from werkzeug.security import generate_password_hash

from ..core.enums import Role, StaffPosition
from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor, fetchone

logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).resolve().parent
SCHEMA_PATH = SQL_DIR / "schema.sql"
SEED_PATH = SQL_DIR / "seed.sql"

# Statements end with ';' at the end of a line.
_STATEMENT_END = re.compile(r";[ \t]*(?:\r?\n|$)")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")

DEMO_ADMIN = ("Munir", "munir")
DEMO_STAFF = (
    ("Zaki", "zaki", StaffPosition.STAF_TU),
    ("Ngiza", "ngiza", StaffPosition.OPERATOR),
)


def split_sql(sql: str) -> Iterator[str]:
    for chunk in _STATEMENT_END.split(_LINE_COMMENT.sub("", sql)):
        stmt = chunk.strip()
        if stmt:
            yield stmt


def _run_sql_file(db_config: Mapping, path: Path) -> int:
    statements = list(split_sql(Path(path).read_text(encoding="utf-8")))
    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)
    return len(statements)


def ensure_database_exists(db_config: Mapping) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: Path = SCHEMA_PATH) -> None:
    """Create the database if needed and apply CREATE TABLE IF NOT EXISTS statements."""
    ensure_database_exists(db_config)
    n = _run_sql_file(db_config, schema_path)
    logger.info("Applied %s to %s (%d statements)", schema_path.name, DBConfig.from_dict(db_config).describe(), n)


def apply_seed_sql(db_config: Mapping, *, seed_path: Path = SEED_PATH) -> None:
    n = _run_sql_file(db_config, seed_path)
    logger.info("Applied %s (%d statements)", seed_path.name, n)


def ensure_demo_users(
    db_config: Mapping,
    *,
    admin_password: str = "admin123",
    staff_password: str = "staff123",
) -> None:
    """Create (or reset the password of) the default admin and the demo tendik accounts."""
    accounts: list[tuple[str, str, str, Role, Optional[StaffPosition]]] = [
        (DEMO_ADMIN[0], DEMO_ADMIN[1], admin_password, Role.ADMIN, None)
    ]
    accounts += [(name, username, staff_password, Role.STAFF, pos) for name, username, pos in DEMO_STAFF]

    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config))) as (_, cur):
        for full_name, username, password, role, position in accounts:
            params = (full_name, generate_password_hash(password), role.value, position.value if position else None)
            cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
            if fetchone(cur):
                cur.execute(
                    "UPDATE users SET full_name=%s, password_hash=%s, role=%s, position=%s, is_active=1 "
                    "WHERE username=%s",
                    (*params, username),
                )
            else:
                cur.execute(
                    "INSERT INTO users (full_name, password_hash, role, position, username) VALUES (%s,%s,%s,%s,%s)",
                    (*params, username),
                )
    logger.info("Demo accounts ready: %s", ", ".join(a[1] for a in accounts))


def list_tables(db_config: Mapping) -> list[str]:
    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
