from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateCheckInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, to_float
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    ar.attendance_id, ar.staff_id, ar.work_date, ar.check_in_time, ar.check_out_time, ar.status,
    ar.latitude, ar.longitude, ar.selfie_photo, ar.created_at, ar.updated_at
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        staff_id=int(r["staff_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        latitude=to_float(r.get("latitude")),
        longitude=to_float(r.get("longitude")),
        selfie_photo=r.get("selfie_photo"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _to_report_row(r: Dict[str, Any]) -> AttendanceReportRow:
    return AttendanceReportRow(record=_to_record(r), full_name=r["full_name"], username=r["username"])


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.staff_id=%s AND ar.work_date=%s
                """,
                (int(staff_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_staff(self, staff_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.staff_id=%s
                ORDER BY ar.work_date DESC
                """,
                (int(staff_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.work_date=%s
                ORDER BY ar.created_at DESC, ar.attendance_id DESC
                """,
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        staff_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        latitude: Optional[float],
        longitude: Optional[float],
        selfie_photo: Optional[str],
        created_at: datetime,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        staff_id, work_date, check_in_time, status,
                        latitude, longitude, selfie_photo, created_at, updated_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(staff_id),
                        work_date,
                        check_in_time,
                        status.value,
                        latitude,
                        longitude,
                        selfie_photo,
                        created_at,
                        created_at,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateCheckInError("Already checked in today") from e
            raise

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime, updated_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, updated_at=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, updated_at, int(attendance_id)),
            )
            return cur.rowcount > 0

    def get_report_rows(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        staff_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses: list[str] = []
        params: list[object] = []

        if start_date is not None:
            clauses.append("ar.work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ar.work_date <= %s")
            params.append(end_date)
        if staff_id is not None:
            clauses.append("ar.staff_id=%s")
            params.append(int(staff_id))
        if status is not None:
            clauses.append("ar.status=%s")
            params.append(status.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}, u.full_name, u.username
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.staff_id
                {where}
                ORDER BY ar.work_date DESC, ar.staff_id ASC
                """,
                tuple(params),
            )
            return [_to_report_row(r) for r in fetchall(cur)]

    def list_activity_between(self, since: datetime, until: datetime) -> Sequence[AttendanceReportRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}, u.full_name, u.username
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.staff_id
                WHERE ar.check_in_time BETWEEN %s AND %s
                   OR ar.check_out_time BETWEEN %s AND %s
                """,
                (since, until, since, until),
            )
            return [_to_report_row(r) for r in fetchall(cur)]
