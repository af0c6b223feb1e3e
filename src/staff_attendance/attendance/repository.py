from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_staff(self, staff_id: int) -> Sequence[AttendanceRecord]:
        """All records of one staff member, newest work_date first."""

        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        """Records of one day, most recently created first."""

        raise NotImplementedError

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
        """Insert a new record.

        Raises DuplicateCheckInError when (staff_id, work_date) already exists.
        """

        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime, updated_at: datetime) -> bool:
        """Set check_out_time only if it is still NULL. Returns False otherwise."""

        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        staff_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError

    def list_activity_between(self, since: datetime, until: datetime) -> Sequence[AttendanceReportRow]:
        """Records whose check-in or check-out time lies in [since, until]."""

        raise NotImplementedError
