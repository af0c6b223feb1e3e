from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date, datetime

from ..core.constants import (
    CHECKIN_CUTOFF,
    LATE_CHECKIN_WINDOW,
    SATURDAY_CHECKOUT_CUTOFF,
    SATURDAY_CHECKOUT_WINDOW,
    WEEKDAY_CHECKOUT_CUTOFF,
    WEEKDAY_CHECKOUT_WINDOW,
)
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyCheckoutStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy

SATURDAY = 5


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on time-of-day rules."""

    rng: random.Random = field(default_factory=random.Random)

    def for_checkin(self, *, now: datetime, today: date) -> AttendanceStrategy:
        cutoff = datetime.combine(today, CHECKIN_CUTOFF)
        if now <= cutoff:
            return NormalStrategy()
        return LateStrategy(LATE_CHECKIN_WINDOW, rng=self.rng)

    def for_checkout(self, *, now: datetime, today: date) -> AttendanceStrategy:
        weekday = today.weekday()
        if weekday < SATURDAY:
            cutoff_t, window = WEEKDAY_CHECKOUT_CUTOFF, WEEKDAY_CHECKOUT_WINDOW
        elif weekday == SATURDAY:
            cutoff_t, window = SATURDAY_CHECKOUT_CUTOFF, SATURDAY_CHECKOUT_WINDOW
        else:
            # Sunday has no checkout rule: record the real time.
            return NormalStrategy()

        if now < datetime.combine(today, cutoff_t):
            return EarlyCheckoutStrategy(window, rng=self.rng)
        return NormalStrategy()
