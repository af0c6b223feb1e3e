from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_on(self, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM holidays WHERE holiday_date=%s LIMIT 1", (day,))
            return fetchone(cur) is not None

    def list_all(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, holiday_date, description, created_at
                FROM holidays
                ORDER BY holiday_date ASC, holiday_id ASC
                """
            )
            return [
                Holiday(
                    holiday_id=int(r["holiday_id"]),
                    holiday_date=r["holiday_date"],
                    description=r["description"],
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def create(self, *, holiday_date: date, description: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays(holiday_date, description) VALUES(%s,%s)",
                (holiday_date, description),
            )
            return int(cur.lastrowid)

    def delete_by_id(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
