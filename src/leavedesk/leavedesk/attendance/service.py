from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..common.datetime_utils import iter_days, month_bounds, now_local, parse_date_field
from ..core.enums import AttendanceStatus, LeaveStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..holidays.repository import HolidayRepository
from ..leaves.repository import LeaveRepository
from ..locations.model import GeoPoint
from ..locations.repository import LocationRepository
from ..profiles.model import Profile
from ..profiles.repository import ProfileRepository
from .factory import CheckInStrategyFactory
from .model import AttendanceListRow, AttendanceRecord, CheckOutSummary, TeamAttendanceRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_VIEW_OTHERS_ROLES = {Role.ADMIN, Role.HR, Role.MANAGER}

HOLIDAY_STATUS = "holiday"


def worked_minutes(check_in: datetime, check_out: datetime) -> int:
    return int((check_out - check_in).total_seconds() // 60)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        profiles: ProfileRepository,
        leaves: LeaveRepository,
        locations: LocationRepository,
        *,
        strategy_factory: CheckInStrategyFactory | None = None,
        holidays: HolidayRepository | None = None,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._leaves = leaves
        self._locations = locations
        self._factory = strategy_factory or CheckInStrategyFactory()
        self._holidays = holidays

    def _get_profile(self, user_id: str) -> Profile:
        profile = self._profiles.get_by_id(user_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def _approved_leave_on(self, user_id: str, day: date):
        for leave in self._leaves.list_overlapping(user_id, day, day):
            if leave.status == LeaveStatus.APPROVED:
                return leave
        return None

    def check_in(
        self,
        user_id: str,
        *,
        mode: str,
        point: Optional[GeoPoint] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        self._get_profile(user_id)
        strategy = self._factory.for_mode(mode)

        leave = self._approved_leave_on(user_id, today)
        if leave and leave.is_full_day:
            raise ValidationError("You are on approved leave today")

        existing = self._attendance.get_for_user_and_date(user_id, today)
        if existing and existing.check_in is not None:
            raise ValidationError("You have already checked in today")

        entry = strategy.on_check_in(point=point, offices=self._locations.list_all())
        record = AttendanceRecord(
            id=existing.id if existing else None,
            user_id=user_id,
            work_date=today,
            status=mode,
            check_in=now,
            location_snapshot={"check_in": entry},
        )

        if existing:
            # Replaces a placeholder row (e.g. marked absent) for the day.
            self._attendance.upsert_day(record)
        else:
            record = replace(record, id=self._attendance.create_checkin(record))

        logger.info("User %s checked in (%s)", user_id, mode)
        return record

    def check_out(
        self,
        user_id: str,
        *,
        point: Optional[GeoPoint] = None,
        now: datetime | None = None,
    ) -> CheckOutSummary:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record or record.check_in is None:
            raise ValidationError("You have not checked in today")
        if record.check_out is not None:
            raise ValidationError("You have already checked out today")

        profile = self._get_profile(user_id)
        strategy = self._factory.for_status(record.status)
        entry = strategy.on_check_out(point=point, offices=self._locations.list_all())

        duration = worked_minutes(record.check_in, now)
        deviation = duration - profile.work.expected_daily_minutes

        snapshot = dict(record.location_snapshot)
        snapshot["check_out"] = entry
        self._attendance.update_checkout(
            attendance_id=record.id,
            check_out=now,
            duration_minutes=duration,
            deviation_minutes=deviation,
            location_snapshot=snapshot,
        )

        logger.info("User %s checked out after %d minutes (deviation %d)", user_id, duration, deviation)
        return CheckOutSummary(duration_minutes=duration, deviation_minutes=deviation)

    def today_status(self, user_id: str, *, today: date | None = None) -> dict:
        today = today or now_local().date()
        record = self._attendance.get_for_user_and_date(user_id, today)

        status: Optional[str] = record.status if record else None
        leave = self._approved_leave_on(user_id, today)
        if leave:
            status = AttendanceStatus.LEAVE.value if leave.is_full_day else f"leave_{leave.session.value}"

        return {
            "status": status,
            "check_in": record.check_in.isoformat() if record and record.check_in else None,
            "check_out": record.check_out.isoformat() if record and record.check_out else None,
        }

    def history(
        self,
        *,
        current_user_id: str,
        current_role: Role,
        user_id: Optional[str],
        month: int,
        year: int,
    ) -> Sequence[AttendanceRecord]:
        target = user_id or current_user_id
        if target != current_user_id and current_role not in _VIEW_OTHERS_ROLES:
            raise AuthorizationError("You can only view your own attendance")

        start, end = month_bounds(year, month)
        return self._attendance.list_for_user(target, start, end)

    def admin_list(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        department: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Sequence[AttendanceListRow]:
        return self._attendance.list_with_profiles(
            start_date=parse_date_field(start_date, "startDate") if start_date else None,
            end_date=parse_date_field(end_date, "endDate") if end_date else None,
            department=None if not department or department == "all" else department,
            name=(name or "").strip() or None,
        )

    def _team_members(self, viewer_id: str, viewer_role: Role, department: Optional[str]) -> Sequence[Profile]:
        department = None if not department or department == "all" else department
        if viewer_role == Role.MANAGER:
            # Managers see their direct reports only.
            return [
                p
                for p in self._profiles.list_profiles(department=department)
                if viewer_id in p.reporting_managers and p.id != viewer_id
            ]
        if viewer_role in (Role.ADMIN, Role.HR):
            return self._profiles.list_profiles(exclude_role=Role.ADMIN, department=department)
        raise AuthorizationError("Only managers, HR and admins can view team attendance")

    def team_attendance(
        self,
        *,
        viewer_id: str,
        viewer_role: Role,
        day: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Sequence[TeamAttendanceRow]:
        """Everyone the viewer oversees, with their status for one day."""

        target = parse_date_field(day, "date") if day else now_local().date()
        members = self._team_members(viewer_id, viewer_role, department)
        records = {r.user_id: r for r in self._attendance.list_in_range(target, target)}
        holidays = self._holidays.list_between(target, target) if self._holidays else []

        rows = []
        for member in members:
            record = records.get(member.id)
            status: Optional[str] = record.status if record else None
            if status is None:
                if self._approved_leave_on(member.id, target):
                    status = AttendanceStatus.LEAVE.value
                elif any(h.applies_to(member.department) for h in holidays):
                    status = HOLIDAY_STATUS
            rows.append(
                TeamAttendanceRow(
                    user={
                        "id": member.id,
                        "full_name": member.full_name,
                        "department": member.department,
                        "designation": member.designation,
                    },
                    status=status,
                    record=record,
                )
            )
        return rows

    def mark_leave_days(self, user_id: str, start: date, end: date) -> int:
        """Overwrite every day in [start, end] with a leave row."""

        count = 0
        for day in iter_days(start, end):
            self._attendance.upsert_day(
                AttendanceRecord(id=None, user_id=user_id, work_date=day, status=AttendanceStatus.LEAVE.value)
            )
            count += 1
        logger.info("Marked %d leave day(s) for user %s", count, user_id)
        return count

    def apply_regularization(self, user_id: str, day: date, check_in: time, check_out: time) -> AttendanceRecord:
        """Record a corrected working day from approved check-in/out times."""

        profile = self._get_profile(user_id)
        started = datetime.combine(day, check_in)
        finished = datetime.combine(day, check_out)
        duration = worked_minutes(started, finished)

        record = AttendanceRecord(
            id=None,
            user_id=user_id,
            work_date=day,
            status=AttendanceStatus.PRESENT.value,
            check_in=started,
            check_out=finished,
            duration_minutes=duration,
            deviation_minutes=duration - profile.work.expected_daily_minutes,
            location_snapshot={"regularized": True},
        )
        self._attendance.upsert_day(record)
        logger.info("Regularized attendance of user %s on %s", user_id, day.isoformat())
        return record
