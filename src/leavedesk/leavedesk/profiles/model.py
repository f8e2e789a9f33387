from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import parse_hhmm
from ..core.constants import DEFAULT_DAILY_MINUTES, DEFAULT_WORK_DAYS
from ..core.enums import Role, WorkMode

logger = logging.getLogger(__name__)


def _minutes_of(hhmm: str) -> int:
    clock = parse_hhmm(hhmm)
    return clock.hour * 60 + clock.minute


def _work_days(raw: Any) -> tuple[int, ...]:
    if not isinstance(raw, (list, tuple)):
        return DEFAULT_WORK_DAYS
    days = tuple(d for d in raw if isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6)
    return days or DEFAULT_WORK_DAYS


@dataclass(frozen=True)
class WorkConfig:
    """Working-time configuration stored as JSON on the profile.

    ``{"mode": "fixed", "fixed": {"start_time": "09:00", "end_time": "18:00", "work_days": [1, 2, 3, 4, 5]}}``
    or ``{"mode": "flexible", "flexible": {"daily_hours": 8, "work_days": [...]}}``.
    Work days use 0=Sunday .. 6=Saturday.
    """

    expected_daily_minutes: int = DEFAULT_DAILY_MINUTES
    work_days: tuple[int, ...] = DEFAULT_WORK_DAYS

    @classmethod
    def from_json(cls, data: Optional[dict]) -> "WorkConfig":
        """Build from the stored JSON; unusable values fall back to the defaults."""

        data = data if isinstance(data, dict) else {}
        flexible = data.get("flexible") if isinstance(data.get("flexible"), dict) else {}
        fixed = data.get("fixed") if isinstance(data.get("fixed"), dict) else {}

        try:
            if data.get("mode") == WorkMode.FLEXIBLE.value and flexible.get("daily_hours"):
                minutes = int(round(float(flexible["daily_hours"]) * 60))
                if minutes > 0:
                    return cls(expected_daily_minutes=minutes, work_days=_work_days(flexible.get("work_days")))
            if fixed.get("start_time") and fixed.get("end_time"):
                minutes = _minutes_of(fixed["end_time"]) - _minutes_of(fixed["start_time"])
                if minutes > 0:
                    return cls(expected_daily_minutes=minutes, work_days=_work_days(fixed.get("work_days")))
        except (AttributeError, OverflowError, TypeError, ValueError):
            logger.warning("Ignoring malformed work_config %r", data)
        return cls()

    def is_work_day(self, sunday_based_weekday: int) -> bool:
        return sunday_based_weekday in self.work_days


@dataclass(frozen=True)
class Profile:
    """Domain entity: an employee account and its HR attributes."""

    id: str
    email: str
    full_name: str
    role: Role
    password_hash: str = ""
    username: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    employment_type: Optional[str] = None
    date_of_joining: Optional[date] = None
    reporting_managers: tuple[str, ...] = ()
    avatar_url: Optional[str] = None
    work_config: dict = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @property
    def work(self) -> WorkConfig:
        return WorkConfig.from_json(self.work_config)

    def to_public(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "full_name": self.full_name,
            "role": self.role.value,
            "department": self.department,
            "designation": self.designation,
            "employment_type": self.employment_type,
            "date_of_joining": self.date_of_joining.isoformat() if self.date_of_joining else None,
            "reporting_managers": list(self.reporting_managers),
            "avatar_url": self.avatar_url,
            "work_config": self.work_config,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class UserDetails:
    """Sensitive personal and bank details, kept apart from the profile."""

    id: str
    personal_email: Optional[str] = None
    phone_number: Optional[str] = None
    salary: Optional[float] = None
    gender: Optional[str] = None
    dob: Optional[date] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    pan_number: Optional[str] = None
    aadhaar_number: Optional[str] = None
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.dob:
            data["dob"] = self.dob.isoformat()
        return data
