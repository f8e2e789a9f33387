from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class LeaveCycle:
    """Window of leaves that count toward the current allowance.

    A leave counts when ``start_date > after`` and ``end_date <= until``.
    """

    after: date
    until: date

    @classmethod
    def for_today(cls, today: date, reset_date: Optional[date]) -> "LeaveCycle":
        after = reset_date if reset_date else date(today.year - 1, 12, 31)
        return cls(after=after, until=date(today.year, 12, 31))

    def contains(self, start: date, end: date) -> bool:
        return start > self.after and end <= self.until
