from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import (
    AlreadyCheckedOutError,
    DuplicateCheckInError,
    HolidayBlockedError,
    NoCheckInFoundError,
)
from ..geofence.service import GeofenceService
from ..holidays.service import HolidayService
from ..users.service import StaffDirectory
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in / check-out state machine: NoRecord -> CheckedIn -> CheckedOut.

    Preconditions are checked in a fixed order and the first failure wins:
    a repeated check-in on a holiday reports the duplicate, not the holiday.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        staff: StaffDirectory,
        geofence: GeofenceService,
        holidays: HolidayService,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._staff = staff
        self._geofence = geofence
        self._holidays = holidays
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock

    def check_in(
        self,
        staff_id: int,
        *,
        latitude: float,
        longitude: float,
        selfie_photo: Optional[str],
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        self._staff.get_staff(staff_id)
        self._geofence.require_within(latitude, longitude)

        if self._attendance.get_for_staff_and_date(staff_id, today):
            raise DuplicateCheckInError("Already checked in today")

        if self._holidays.is_holiday(today):
            raise HolidayBlockedError("Cannot check in on a holiday")

        strategy = self._factory.for_checkin(now=now, today=today)
        decision = strategy.decide(now=now, today=today)

        # The unique key on (staff_id, work_date) rejects a concurrent duplicate.
        attendance_id = self._attendance.create_checkin(
            staff_id=staff_id,
            work_date=today,
            check_in_time=decision.recorded_time,
            status=decision.status,
            latitude=latitude,
            longitude=longitude,
            selfie_photo=selfie_photo,
            created_at=now,
        )
        logger.info(
            "Check-in staff=%s date=%s status=%s recorded=%s actual=%s",
            staff_id,
            today.isoformat(),
            decision.status.value,
            decision.recorded_time.strftime("%H:%M"),
            now.strftime("%H:%M:%S"),
        )
        return self._reload(attendance_id)

    def check_out(
        self,
        staff_id: int,
        *,
        latitude: float,
        longitude: float,
        selfie_photo: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        # Checkout coordinates and selfie are validated/accepted but only the
        # check-in ones are stored on the record.
        now = now or self._clock()
        today = now.date()

        self._staff.get_staff(staff_id)
        self._geofence.require_within(latitude, longitude)

        record = self._attendance.get_for_staff_and_date(staff_id, today)
        if not record:
            raise NoCheckInFoundError("No check-in record found for today")
        if record.check_out_time is not None:
            raise AlreadyCheckedOutError("Already checked out today")

        strategy = self._factory.for_checkout(now=now, today=today)
        decision = strategy.decide(now=now, today=today, current=record.status)
        if decision.status != record.status:
            raise RuntimeError(
                f"checkout strategy {type(strategy).__name__} changed status {record.status.value} -> {decision.status.value}"
            )

        updated = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=decision.recorded_time,
            updated_at=now,
        )
        if not updated:
            # Lost a race with another checkout (or the record vanished).
            if self._attendance.get_by_id(record.attendance_id) is None:
                raise NoCheckInFoundError("No check-in record found for today")
            raise AlreadyCheckedOutError("Already checked out today")

        logger.info(
            "Check-out staff=%s date=%s recorded=%s actual=%s",
            staff_id,
            today.isoformat(),
            decision.recorded_time.strftime("%H:%M"),
            now.strftime("%H:%M:%S"),
        )
        return self._reload(record.attendance_id)

    def get_today_record(self, staff_id: int, today: date | None = None) -> Optional[AttendanceRecord]:
        """Get today's attendance record for a staff member."""
        return self._attendance.get_for_staff_and_date(staff_id, today or self._clock().date())

    def _reload(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if record is None:
            raise RuntimeError(f"attendance record {attendance_id} missing after write")
        return record
