from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import Leave, LeaveListRow


class LeaveRepository(Protocol):
    def get_by_id(self, leave_id: int) -> Optional[Leave]:
        raise NotImplementedError

    def list_for_user(self, user_id: str, status: Optional[LeaveStatus] = None) -> Sequence[Leave]:
        raise NotImplementedError

    def list_overlapping(self, user_id: str, start_date: date, end_date: date) -> Sequence[Leave]:
        """Non-rejected leaves of the user intersecting [start_date, end_date]."""

        raise NotImplementedError

    def list_approved_in_range(self, start_date: date, end_date: date) -> Sequence[Leave]:
        """Approved leaves of every user intersecting [start_date, end_date]."""

        raise NotImplementedError

    def list_pending(self, approver_id: Optional[str] = None) -> Sequence[LeaveListRow]:
        """Pending leaves; restricted to one approver (direct or reporting manager) when given."""

        raise NotImplementedError

    def create(self, leave: Leave) -> int:
        raise NotImplementedError

    def delete_by_id(self, leave_id: int) -> bool:
        raise NotImplementedError

    def set_decision(self, leave_id: int, *, status: LeaveStatus, decided_by: str, decided_at: datetime) -> bool:
        raise NotImplementedError
