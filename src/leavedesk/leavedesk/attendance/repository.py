from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceListRow, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: str, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_in_range(self, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(self, record: AttendanceRecord) -> int:
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out: datetime,
        duration_minutes: int,
        deviation_minutes: int,
        location_snapshot: dict,
    ) -> bool:
        raise NotImplementedError

    def upsert_day(self, record: AttendanceRecord) -> None:
        """Insert or overwrite the (user_id, work_date) row."""

        raise NotImplementedError

    def list_with_profiles(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        department: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Sequence[AttendanceListRow]:
        raise NotImplementedError
