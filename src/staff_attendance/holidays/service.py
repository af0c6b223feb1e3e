from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class HolidayService:
    """Holiday calendar: admin management plus the check-in gate."""

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def is_holiday(self, day: date) -> bool:
        return self._holidays.exists_on(day)

    def list_holidays(self) -> Sequence[Holiday]:
        return self._holidays.list_all()

    def create_holiday(self, *, holiday_date: date, description: str) -> int:
        description = require_non_empty(description, "description")
        holiday_id = self._holidays.create(holiday_date=holiday_date, description=description)
        logger.info("Holiday %s added for %s", holiday_id, holiday_date.isoformat())
        return holiday_id

    def delete_holiday(self, holiday_id: int) -> None:
        if not self._holidays.delete_by_id(holiday_id):
            raise NotFoundError("Holiday not found")
        logger.info("Holiday %s deleted", holiday_id)
