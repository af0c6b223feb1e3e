from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from .base import RandomWindowStrategy


class LateStrategy(RandomWindowStrategy):
    """Check-in after the cutoff: LATE, recorded inside the morning window."""

    def status_for(self, current: Optional[AttendanceStatus]) -> AttendanceStatus:
        return AttendanceStatus.LATE
