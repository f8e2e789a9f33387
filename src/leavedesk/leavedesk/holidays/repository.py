from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def list_between(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Sequence[Holiday]:
        """Ordered by date; either bound may be open."""
        raise NotImplementedError

    def create(self, holiday: Holiday) -> int:
        raise NotImplementedError

    def delete_by_id(self, holiday_id: int) -> bool:
        raise NotImplementedError
