from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def exists_on(self, day: date) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, *, holiday_date: date, description: str) -> int:
        raise NotImplementedError

    def delete_by_id(self, holiday_id: int) -> bool:
        raise NotImplementedError
