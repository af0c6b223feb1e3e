from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ...common.datetime_utils import random_time_between
from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class TimeDecision:
    recorded_time: datetime
    status: AttendanceStatus


class AttendanceStrategy(ABC):
    """Strategy Pattern: decide the recorded time and status of an attendance event.

    `current` is the record's status at checkout; it is None for check-ins.
    """

    @abstractmethod
    def decide(self, *, now: datetime, today: date, current: Optional[AttendanceStatus] = None) -> TimeDecision:
        raise NotImplementedError


class RandomWindowStrategy(AttendanceStrategy):
    """Record a random whole minute inside a fixed window of `today` instead of `now`."""

    def __init__(self, window: tuple[time, time], *, rng: random.Random):
        self._window = window
        self._rng = rng

    def decide(self, *, now: datetime, today: date, current: Optional[AttendanceStatus] = None) -> TimeDecision:
        start, end = self._window
        return TimeDecision(
            recorded_time=random_time_between(today, start, end, rng=self._rng),
            status=self.status_for(current),
        )

    @abstractmethod
    def status_for(self, current: Optional[AttendanceStatus]) -> AttendanceStatus:
        raise NotImplementedError
