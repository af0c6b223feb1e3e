from __future__ import annotations

import random
from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Current wall-clock time at the school, as a naive datetime.

    Note: Wrapped so tests can patch/inject a fixed clock.
    """
    return datetime.now(ZoneInfo(tz_name or DEFAULT_TIMEZONE)).replace(tzinfo=None)


def random_time_between(day: date, start: time, end: time, *, rng: random.Random) -> datetime:
    """Uniformly random whole minute in [start, end] on `day` (both ends inclusive)."""
    start_dt = datetime.combine(day, start)
    span = int((datetime.combine(day, end) - start_dt).total_seconds() // 60)
    return start_dt + timedelta(minutes=rng.randint(0, span))
