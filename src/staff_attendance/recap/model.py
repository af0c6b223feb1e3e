from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceAction, AttendanceStatus


@dataclass(frozen=True)
class RecapFilter:
    """Optional filters, combined with AND. An empty filter matches everything."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    staff_id: Optional[int] = None
    status: Optional[AttendanceStatus] = None


@dataclass(frozen=True)
class LiveActivity:
    staff_name: str
    action: AttendanceAction
    time: datetime
    photo: Optional[str]
