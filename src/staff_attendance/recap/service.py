from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Sequence

from ..attendance.model import AttendanceRecord, AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LIVE_WINDOW_MINUTES
from ..core.enums import AttendanceAction
from ..core.exceptions import NotFoundError
from ..users.service import StaffDirectory
from .model import LiveActivity, RecapFilter

CSV_FIELDS = [
    "work_date",
    "staff_id",
    "full_name",
    "username",
    "check_in",
    "check_out",
    "status",
    "latitude",
    "longitude",
]


class RecapitulationService:
    """Read-only projections of the attendance ledger."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        staff: StaffDirectory,
        *,
        clock: Callable[[], datetime] = now_local,
        live_window_minutes: int = DEFAULT_LIVE_WINDOW_MINUTES,
    ):
        self._attendance = attendance
        self._staff = staff
        self._clock = clock
        self._live_window_minutes = int(live_window_minutes)

    def history(self, staff_id: int) -> Sequence[AttendanceRecord]:
        if not self._staff.exists(staff_id):
            raise NotFoundError("Tendik not found")
        return self._attendance.list_for_staff(int(staff_id))

    def recapitulation(self, recap_filter: RecapFilter | None = None) -> Sequence[AttendanceReportRow]:
        f = recap_filter or RecapFilter()
        return self._attendance.get_report_rows(
            start_date=f.start_date,
            end_date=f.end_date,
            staff_id=f.staff_id,
            status=f.status,
        )

    def today(self, *, today: date | None = None) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_date(today or self._clock().date())

    def live_activity(self, window_minutes: int | None = None, *, now: datetime | None = None) -> list[LiveActivity]:
        """Check-ins and check-outs recorded in [now - window, now], newest first.

        A record with both events in the window yields two entries. Early
        checkouts are recorded at a later afternoon time and only show up once
        that time is reached. Checkout entries carry no photo: only the
        check-in selfie is stored on the record.
        """
        now = now or self._clock()
        minutes = self._live_window_minutes if window_minutes is None else int(window_minutes)
        since = now - timedelta(minutes=minutes)

        out: list[LiveActivity] = []
        for row in self._attendance.list_activity_between(since, now):
            rec = row.record
            if rec.check_in_time is not None and since <= rec.check_in_time <= now:
                out.append(LiveActivity(row.full_name, AttendanceAction.CHECKIN, rec.check_in_time, rec.selfie_photo))
            if rec.check_out_time is not None and since <= rec.check_out_time <= now:
                out.append(LiveActivity(row.full_name, AttendanceAction.CHECKOUT, rec.check_out_time, None))

        out.sort(key=lambda a: a.time, reverse=True)
        return out

    def build_export_rows(self, recap_filter: RecapFilter | None = None) -> list[dict]:
        """Flatten a recapitulation into CSV-ready dicts (keys = CSV_FIELDS)."""
        rows = []
        for row in self.recapitulation(recap_filter):
            r = row.record
            rows.append(
                {
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "staff_id": r.staff_id,
                    "full_name": row.full_name,
                    "username": row.username,
                    "check_in": r.check_in_time.strftime("%H:%M") if r.check_in_time else "-",
                    "check_out": r.check_out_time.strftime("%H:%M") if r.check_out_time else "-",
                    "status": r.status.label,
                    "latitude": "" if r.latitude is None else r.latitude,
                    "longitude": "" if r.longitude is None else r.longitude,
                }
            )
        return rows
