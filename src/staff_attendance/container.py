from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Callable, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_LIVE_WINDOW_MINUTES, DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .geofence.mysql_geofence_repository import MySQLGeofenceRepository
from .geofence.repository import GeofenceRepository
from .geofence.service import GeofenceService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .recap.service import RecapitulationService
from .storage.photo_store import LocalPhotoStore
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, StaffDirectory


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    geofence_repo: GeofenceRepository
    holidays_repo: HolidayRepository
    photo_store: LocalPhotoStore

    auth_service: AuthService
    staff_directory: StaffDirectory
    geofence_service: GeofenceService
    holiday_service: HolidayService
    attendance_service: AttendanceService
    recap_service: RecapitulationService


def wire_services(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    geofence_repo: GeofenceRepository,
    holidays_repo: HolidayRepository,
    photo_store: LocalPhotoStore,
    clock: Callable[[], datetime],
    rng: Optional[random.Random] = None,
    live_window_minutes: int = DEFAULT_LIVE_WINDOW_MINUTES,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Compose services on top of the given repositories (MySQL or in-memory)."""
    staff_directory = StaffDirectory(users_repo)
    geofence_service = GeofenceService(geofence_repo)
    holiday_service = HolidayService(holidays_repo)

    attendance_service = AttendanceService(
        attendance_repo,
        staff_directory,
        geofence_service,
        holiday_service,
        strategy_factory=AttendanceStrategyFactory(rng=rng or random.Random()),
        clock=clock,
    )
    recap_service = RecapitulationService(
        attendance_repo,
        staff_directory,
        clock=clock,
        live_window_minutes=live_window_minutes,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        geofence_repo=geofence_repo,
        holidays_repo=holidays_repo,
        photo_store=photo_store,
        auth_service=AuthService(users_repo),
        staff_directory=staff_directory,
        geofence_service=geofence_service,
        holiday_service=holiday_service,
        attendance_service=attendance_service,
        recap_service=recap_service,
    )


def build_container(
    *,
    db_config: dict,
    upload_dir: str = "uploads",
    timezone: str = DEFAULT_TIMEZONE,
    live_window_minutes: int = DEFAULT_LIVE_WINDOW_MINUTES,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        geofence_repo=MySQLGeofenceRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        photo_store=LocalPhotoStore(upload_dir),
        clock=partial(now_local, timezone),
        live_window_minutes=live_window_minutes,
        conn=conn,
    )
