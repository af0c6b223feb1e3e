from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, TimeDecision


class NormalStrategy(AttendanceStrategy):
    """Record the real time: on-time check-in, or checkout at/after the cutoff."""

    def decide(self, *, now: datetime, today: date, current: Optional[AttendanceStatus] = None) -> TimeDecision:
        return TimeDecision(recorded_time=now, status=current or AttendanceStatus.ON_TIME)
