from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional


@dataclass(frozen=True)
class Holiday:
    """A day off; ``departments`` of None means the whole company."""

    id: Optional[int]
    name: str
    holiday_date: date
    departments: Optional[tuple[str, ...]] = None

    def applies_to(self, department: Optional[str]) -> bool:
        if not self.departments:
            return True
        return (department or "").strip() in self.departments

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "date": self.holiday_date.isoformat(),
            "departments": list(self.departments) if self.departments else None,
        }
