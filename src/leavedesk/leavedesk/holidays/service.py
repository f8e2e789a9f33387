from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_date_field
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


def _departments(raw: Any) -> Optional[tuple[str, ...]]:
    if raw is None:
        return None
    if not isinstance(raw, list) or not all(isinstance(d, str) for d in raw):
        raise ValidationError("Departments must be a list of department names")
    cleaned = tuple(dict.fromkeys(d.strip() for d in raw if d.strip()))
    return cleaned or None


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list_holidays(self, *, year: Optional[int] = None, department: Optional[str] = None) -> Sequence[Holiday]:
        if year is None:
            found = self._holidays.list_between()
        else:
            found = self._holidays.list_between(date(year, 1, 1), date(year, 12, 31))
        if department is None:
            return list(found)
        return [h for h in found if h.applies_to(department)]

    def create_holiday(self, body: dict[str, Any]) -> Holiday:
        name = require_non_empty(body.get("name"), "Name")
        raw_date = body.get("date")
        if not raw_date:
            raise ValidationError("Date is required")
        holiday = Holiday(
            id=None,
            name=name,
            holiday_date=parse_date_field(str(raw_date), "Date"),
            departments=_departments(body.get("departments")),
        )
        new_id = self._holidays.create(holiday)
        logger.info("Created holiday %s (%s on %s)", new_id, holiday.name, holiday.holiday_date)
        return replace(holiday, id=new_id)

    def delete_holiday(self, holiday_id: int) -> None:
        if not self._holidays.delete_by_id(holiday_id):
            raise NotFoundError("Holiday not found")
        logger.info("Deleted holiday %s", holiday_id)
