from __future__ import annotations

import random
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from staff_attendance.attendance.model import AttendanceRecord, AttendanceReportRow
from staff_attendance.container import wire_services
from staff_attendance.core.enums import Role, StaffPosition
from staff_attendance.core.exceptions import DuplicateCheckInError
from staff_attendance.geofence.model import GeofenceSetting
from staff_attendance.holidays.model import Holiday
from staff_attendance.main import create_app
from staff_attendance.storage.photo_store import LocalPhotoStore
from staff_attendance.users.model import User

SCHOOL_LAT = -6.2088
SCHOOL_LON = 106.8456


class InMemoryUsers:
    def __init__(self, users: list[User]):
        self._by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.username == username), None)


class InMemoryAttendance:
    """Mirrors the MySQL repository: unique (staff_id, work_date), guarded checkout."""

    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._rows: dict[int, AttendanceRecord] = {}
        self._id = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._rows[record.attendance_id] = record
        self._id = max(self._id, record.attendance_id)
        return record

    def delete(self, attendance_id: int) -> None:
        self._rows.pop(attendance_id, None)

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._rows.get(attendance_id)

    def _find(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next((r for r in self._rows.values() if r.staff_id == staff_id and r.work_date == work_date), None)

    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._find(staff_id, work_date)

    def list_for_staff(self, staff_id: int):
        items = [r for r in self._rows.values() if r.staff_id == staff_id]
        return sorted(items, key=lambda r: r.work_date, reverse=True)

    def list_for_date(self, work_date: date):
        items = [r for r in self._rows.values() if r.work_date == work_date]
        return sorted(items, key=lambda r: (r.created_at or datetime.min, r.attendance_id), reverse=True)

    def create_checkin(
        self, *, staff_id, work_date, check_in_time, status, latitude, longitude, selfie_photo, created_at
    ) -> int:
        if self._find(staff_id, work_date):
            raise DuplicateCheckInError("Already checked in today")
        self._id += 1
        self._rows[self._id] = AttendanceRecord(
            attendance_id=self._id,
            staff_id=staff_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=status,
            latitude=latitude,
            longitude=longitude,
            selfie_photo=selfie_photo,
            created_at=created_at,
            updated_at=created_at,
        )
        return self._id

    def update_checkout(self, *, attendance_id, check_out_time, updated_at) -> bool:
        rec = self._rows.get(attendance_id)
        if rec is None or rec.check_out_time is not None:
            return False
        self._rows[attendance_id] = replace(rec, check_out_time=check_out_time, updated_at=updated_at)
        return True

    def _row(self, rec: AttendanceRecord) -> AttendanceReportRow:
        user = self._users.get_by_id(rec.staff_id)
        return AttendanceReportRow(record=rec, full_name=user.full_name, username=user.username)

    def get_report_rows(self, *, start_date=None, end_date=None, staff_id=None, status=None):
        items = [
            r
            for r in self._rows.values()
            if (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
            and (staff_id is None or r.staff_id == staff_id)
            and (status is None or r.status == status)
        ]
        items.sort(key=lambda r: (-r.work_date.toordinal(), r.staff_id))
        return [self._row(r) for r in items]

    def list_activity_between(self, since: datetime, until: datetime):
        return [
            self._row(r)
            for r in self._rows.values()
            if (r.check_in_time and since <= r.check_in_time <= until)
            or (r.check_out_time and since <= r.check_out_time <= until)
        ]


class InMemoryGeofence:
    def __init__(self, setting: Optional[GeofenceSetting] = None):
        self.setting = setting

    def get_current(self) -> Optional[GeofenceSetting]:
        return self.setting

    def upsert(self, *, school_latitude, school_longitude, tolerance_radius) -> GeofenceSetting:
        self.setting = GeofenceSetting(school_latitude, school_longitude, tolerance_radius)
        return self.setting


class InMemoryHolidays:
    def __init__(self):
        self._rows: dict[int, Holiday] = {}
        self._id = 0

    def exists_on(self, day: date) -> bool:
        return any(h.holiday_date == day for h in self._rows.values())

    def list_all(self):
        return sorted(self._rows.values(), key=lambda h: h.holiday_date)

    def create(self, *, holiday_date: date, description: str) -> int:
        self._id += 1
        self._rows[self._id] = Holiday(self._id, holiday_date, description)
        return self._id

    def delete_by_id(self, holiday_id: int) -> bool:
        return self._rows.pop(holiday_id, None) is not None


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_user(user_id: int, username: str, *, role: Role = Role.STAFF, password: str = "staff123", **kw) -> User:
    return User(
        user_id=user_id,
        full_name=kw.pop("full_name", username.title()),
        username=username,
        password_hash=generate_password_hash(password),
        role=role,
        **kw,
    )


@pytest.fixture
def clock():
    # Wednesday
    return FakeClock(datetime(2026, 1, 7, 6, 0, 0))


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            make_user(1, "munir", role=Role.ADMIN, password="admin123"),
            make_user(42, "zaki", position=StaffPosition.STAF_TU),
            make_user(7, "ngiza", position=StaffPosition.OPERATOR),
            make_user(9, "rahma", position=StaffPosition.PENJAGA_SEKOLAH),
        ]
    )


@pytest.fixture
def geofence_repo():
    return InMemoryGeofence(GeofenceSetting(SCHOOL_LAT, SCHOOL_LON, 100.0))


@pytest.fixture
def container(users_repo, geofence_repo, clock, tmp_path):
    return wire_services(
        users_repo=users_repo,
        attendance_repo=InMemoryAttendance(users_repo),
        geofence_repo=geofence_repo,
        holidays_repo=InMemoryHolidays(),
        photo_store=LocalPhotoStore(tmp_path / "uploads"),
        clock=clock,
        rng=random.Random(1234),
    )


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="staff_attendance.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()
