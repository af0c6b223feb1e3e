from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per (staff, work_date)."""

    attendance_id: int
    staff_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    selfie_photo: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for recap/export: a record joined with its staff identity."""

    record: AttendanceRecord
    full_name: str
    username: str
