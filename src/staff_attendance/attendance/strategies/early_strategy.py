from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from .base import RandomWindowStrategy


class EarlyCheckoutStrategy(RandomWindowStrategy):
    """Checkout before the cutoff: recorded inside the window after it, status kept."""

    def status_for(self, current: Optional[AttendanceStatus]) -> AttendanceStatus:
        return current or AttendanceStatus.ON_TIME
