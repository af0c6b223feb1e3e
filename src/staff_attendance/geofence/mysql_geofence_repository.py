from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, to_float
from .model import GeofenceSetting
from .repository import GeofenceRepository

# geotag_settings holds at most one row, pinned to this id.
_SINGLETON_ID = 1


class MySQLGeofenceRepository(GeofenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_current(self) -> Optional[GeofenceSetting]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT school_latitude, school_longitude, tolerance_radius, updated_at
                FROM geotag_settings
                WHERE setting_id=%s
                """,
                (_SINGLETON_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return GeofenceSetting(
                school_latitude=to_float(r["school_latitude"]),
                school_longitude=to_float(r["school_longitude"]),
                tolerance_radius=to_float(r["tolerance_radius"]),
                updated_at=r.get("updated_at"),
            )

    def upsert(self, *, school_latitude: float, school_longitude: float, tolerance_radius: float) -> GeofenceSetting:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO geotag_settings(setting_id, school_latitude, school_longitude, tolerance_radius)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    school_latitude=VALUES(school_latitude),
                    school_longitude=VALUES(school_longitude),
                    tolerance_radius=VALUES(tolerance_radius)
                """,
                (_SINGLETON_ID, school_latitude, school_longitude, tolerance_radius),
            )
        current = self.get_current()
        if current is None:
            raise RuntimeError("geotag_settings row missing after upsert")
        return current
