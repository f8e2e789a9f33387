from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import inclusive_days
from ..core.constants import HALF_DAY_LEAVE, REGULARIZATION_LEAVE
from ..core.enums import LeaveSession, LeaveStatus

REGULARIZATION_REASON_TYPE = "regularization_request"


@dataclass(frozen=True)
class Leave:
    """Domain entity: a time-off (or regularization) request."""

    id: Optional[int]
    user_id: str
    leave_type: str
    start_date: date
    end_date: date
    status: LeaveStatus
    reason: Optional[str] = None
    approver_id: Optional[str] = None
    duration: Optional[float] = None
    session: LeaveSession = LeaveSession.FULL_DAY
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def days(self) -> float:
        """Days charged against the allowance."""
        if self.duration:
            return float(self.duration)
        if self.leave_type == HALF_DAY_LEAVE:
            return 0.5
        return float(inclusive_days(self.start_date, self.end_date))

    @property
    def is_full_day(self) -> bool:
        return self.session == LeaveSession.FULL_DAY

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start

    def regularization(self) -> Optional["RegularizationRequest"]:
        if self.leave_type != REGULARIZATION_LEAVE:
            return None
        return RegularizationRequest.from_reason(self.reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.leave_type,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "reason": self.reason,
            "status": self.status.value,
            "approver_id": self.approver_id,
            "duration": self.duration,
            "session": self.session.value,
            "decided_by": self.decided_by,
            "decided_at": self.decided_at.isoformat() if self.decided_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class RegularizationRequest:
    """Requested check-in/out times, carried as JSON in the leave reason."""

    reason: str
    check_in: str
    check_out: str

    def to_reason(self) -> str:
        return json.dumps(
            {
                "reason": self.reason,
                "checkIn": self.check_in,
                "checkOut": self.check_out,
                "type": REGULARIZATION_REASON_TYPE,
            }
        )

    @classmethod
    def from_reason(cls, raw: Optional[str]) -> Optional["RegularizationRequest"]:
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(data, dict) or data.get("type") != REGULARIZATION_REASON_TYPE:
            return None
        if not data.get("checkIn") or not data.get("checkOut"):
            return None
        return cls(reason=data.get("reason") or "", check_in=data["checkIn"], check_out=data["checkOut"])


@dataclass(frozen=True)
class LeaveListRow:
    """Leave plus the requester's summary, for approver inboxes."""

    leave: Leave
    requester: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        data = self.leave.to_dict()
        data["profiles"] = self.requester
        return data
