from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one user's attendance for one day."""

    id: Optional[int]
    user_id: str
    work_date: date
    status: str
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    deviation_minutes: Optional[int] = None
    location_snapshot: dict = field(default_factory=dict)

    @property
    def missed_checkout(self) -> bool:
        return self.check_in is not None and self.check_out is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.work_date.isoformat(),
            "status": self.status,
            "check_in": _iso(self.check_in),
            "check_out": _iso(self.check_out),
            "duration_minutes": self.duration_minutes,
            "deviation_minutes": self.deviation_minutes,
            "location_snapshot": self.location_snapshot,
        }


@dataclass(frozen=True)
class AttendanceListRow:
    """Read-model for the admin attendance register (row + owner summary)."""

    record: AttendanceRecord
    profile: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        data = self.record.to_dict()
        data["profiles"] = self.profile
        return data


@dataclass(frozen=True)
class CheckOutSummary:
    duration_minutes: int
    deviation_minutes: int

    @property
    def message(self) -> str:
        hours, minutes = divmod(self.duration_minutes, 60)
        text = f"You worked: {hours}h {minutes}m. "
        dev_hours, dev_minutes = divmod(abs(self.deviation_minutes), 60)
        if self.deviation_minutes < 0:
            return text + f"Shortfall: {dev_hours}h {dev_minutes}m."
        return text + f"Extra: {dev_hours}h {dev_minutes}m."


@dataclass(frozen=True)
class TeamAttendanceRow:
    """One team member's day: their record if any, else leave/holiday/None."""

    user: dict[str, Any]
    status: Optional[str]
    record: Optional[AttendanceRecord] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "user": self.user,
            "status": self.status,
            "check_in": _iso(self.record.check_in) if self.record else None,
            "check_out": _iso(self.record.check_out) if self.record else None,
            "duration_minutes": self.record.duration_minutes if self.record else None,
        }
