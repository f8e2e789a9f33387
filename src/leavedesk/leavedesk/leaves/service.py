from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import inclusive_days, now_local, parse_date_field, parse_hhmm
from ..core.constants import HALF_DAY_LEAVE, REGULARIZATION_LEAVE
from ..core.enums import LeaveSession, LeaveStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..departments.repository import LeaveLimitRepository
from ..profiles.model import Profile
from ..profiles.repository import ProfileRepository
from ..settings.model import LeaveCycle
from ..settings.service import SettingsService
from .model import Leave, LeaveListRow, RegularizationRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_SUBMIT_FOR_OTHERS_ROLES = {Role.ADMIN, Role.HR}
_APPROVER_ROLES = {Role.ADMIN, Role.HR, Role.MANAGER}


def _fmt(days: float) -> str:
    return f"{days:g}"


def requested_days(leave_type: str, start: date, end: date, session: Optional[str]) -> tuple[float, LeaveSession]:
    """Days a new request charges, and the session it is stored with."""

    if leave_type == HALF_DAY_LEAVE:
        try:
            half = LeaveSession(session or LeaveSession.FIRST_HALF.value)
        except ValueError:
            half = None
        if half not in (LeaveSession.FIRST_HALF, LeaveSession.SECOND_HALF):
            raise ValidationError("Invalid session for Half Day leave")
        return 0.5, half
    return float(inclusive_days(start, end)), LeaveSession.FULL_DAY


def used_days(leaves: Sequence[Leave], leave_type: str, cycle: LeaveCycle, statuses: set[LeaveStatus]) -> float:
    return sum(
        l.days
        for l in leaves
        if l.leave_type == leave_type and l.status in statuses and cycle.contains(l.start_date, l.end_date)
    )


class LeaveService:
    """Use cases: apply/cancel/decide leaves, balances, regularization."""

    def __init__(
        self,
        leaves: LeaveRepository,
        profiles: ProfileRepository,
        limits: LeaveLimitRepository,
        settings: SettingsService,
        attendance: AttendanceService,
    ):
        self._leaves = leaves
        self._profiles = profiles
        self._limits = limits
        self._settings = settings
        self._attendance = attendance

    def _get_profile(self, user_id: str, message: str = "User profile not found") -> Profile:
        profile = self._profiles.get_by_id(user_id)
        if not profile:
            raise NotFoundError(message)
        return profile

    def _on_approved(self, leave: Leave) -> None:
        regularization = leave.regularization()
        if regularization:
            self._attendance.apply_regularization(
                leave.user_id,
                leave.start_date,
                parse_hhmm(regularization.check_in),
                parse_hhmm(regularization.check_out),
            )
        else:
            self._attendance.mark_leave_days(leave.user_id, leave.start_date, leave.end_date)

    def apply(
        self,
        *,
        current_user_id: str,
        current_role: Role,
        body: dict[str, Any],
        now: datetime | None = None,
    ) -> Leave:
        now = now or now_local()

        user_id = str(body.get("userId") or current_user_id)
        if user_id != current_user_id and current_role not in _SUBMIT_FOR_OTHERS_ROLES:
            raise AuthorizationError("You can only apply for your own leave")

        leave_type = (body.get("type") or "").strip()
        if not leave_type or not body.get("startDate") or not body.get("endDate"):
            raise ValidationError("Missing required fields")

        profile = self._get_profile(user_id)

        start = parse_date_field(body.get("startDate"), "startDate")
        end = parse_date_field(body.get("endDate"), "endDate")
        if end < start:
            raise ValidationError("End date cannot be before start date")

        days, session = requested_days(leave_type, start, end, body.get("session"))

        overlapping = self._leaves.list_overlapping(user_id, start, end)
        if overlapping:
            if any(l.status == LeaveStatus.APPROVED for l in overlapping):
                raise ValidationError("That day leave is already approved. You can't apply. Contact admin.")
            raise ValidationError("You already have a leave request for this date. Please cancel it to proceed.")

        if profile.department:
            limit = self._limits.get_limit(profile.department, leave_type)
            if limit:
                cycle = self._settings.current_cycle(now.date())
                used = used_days(
                    self._leaves.list_for_user(user_id),
                    leave_type,
                    cycle,
                    {LeaveStatus.PENDING, LeaveStatus.APPROVED},
                )
                if used + days > limit.limit_days:
                    raise ValidationError(
                        f"Leave limit exceeded. You have used {_fmt(used)} of {_fmt(limit.limit_days)} "
                        f"{leave_type} leaves. Requesting {_fmt(days)} days would exceed the limit."
                    )

        auto_approve = profile.role == Role.ADMIN
        leave = Leave(
            id=None,
            user_id=user_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            reason=body.get("reason"),
            status=LeaveStatus.APPROVED if auto_approve else LeaveStatus.PENDING,
            approver_id=user_id if auto_approve else (body.get("approverId") or None),
            duration=days,
            session=session,
            decided_by=user_id if auto_approve else None,
            decided_at=now if auto_approve else None,
            created_at=now,
        )
        leave = replace(leave, id=self._leaves.create(leave))

        logger.info("Leave %s submitted for user %s (%s, %s days, %s)", leave.id, user_id, leave_type, _fmt(days), leave.status.value)
        if auto_approve:
            self._on_approved(leave)
        return leave

    def submit_regularization(
        self,
        *,
        current_user_id: str,
        current_role: Role,
        body: dict[str, Any],
        now: datetime | None = None,
    ) -> Leave:
        day = (body.get("date") or "").strip()
        check_in = (body.get("checkIn") or "").strip()
        check_out = (body.get("checkOut") or "").strip()
        if not day or not check_in or not check_out:
            raise ValidationError("Missing required fields")

        try:
            starts, ends = parse_hhmm(check_in), parse_hhmm(check_out)
        except ValueError:
            raise ValidationError("Times must be HH:MM")
        if starts >= ends:
            raise ValidationError("Check-out time must be after Check-in time")

        request = RegularizationRequest(reason=body.get("reason") or "", check_in=check_in, check_out=check_out)
        return self.apply(
            current_user_id=current_user_id,
            current_role=current_role,
            body={
                "type": REGULARIZATION_LEAVE,
                "startDate": day,
                "endDate": day,
                "reason": request.to_reason(),
                "approverId": body.get("approverId"),
            },
            now=now,
        )

    def cancel(self, *, current_user_id: str, leave_id: Any, owner_id: Optional[str] = None) -> None:
        if not leave_id:
            raise ValidationError("Missing id or userId")
        owner_id = owner_id or current_user_id
        if owner_id != current_user_id:
            raise AuthorizationError("Unauthorized")

        leave = self._leaves.get_by_id(_leave_id(leave_id))
        if not leave:
            raise NotFoundError("Leave not found")
        if leave.user_id != owner_id:
            raise AuthorizationError("Unauthorized")
        if leave.status != LeaveStatus.PENDING:
            raise ValidationError("Only pending leaves can be cancelled")

        self._leaves.delete_by_id(leave.id)
        logger.info("Leave %s cancelled by user %s", leave.id, owner_id)

    def _can_decide(self, leave: Leave, approver_id: str, approver_role: Role) -> bool:
        if approver_role in (Role.ADMIN, Role.HR):
            return True
        if approver_role != Role.MANAGER:
            return False
        if leave.approver_id == approver_id:
            return True
        requester = self._profiles.get_by_id(leave.user_id)
        return bool(requester and approver_id in requester.reporting_managers)

    def decide(
        self,
        *,
        approver_id: str,
        approver_role: Role,
        leave_id: Any,
        status: Optional[str],
        now: datetime | None = None,
    ) -> Leave:
        if not leave_id or not status:
            raise ValidationError("Missing required fields")
        if approver_role not in _APPROVER_ROLES:
            raise AuthorizationError("You are not allowed to approve leaves")

        try:
            decision = LeaveStatus(status)
        except ValueError:
            decision = None
        if decision not in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
            raise ValidationError("Status must be approved or rejected")

        leave = self._leaves.get_by_id(_leave_id(leave_id))
        if not leave:
            raise NotFoundError("Leave not found")
        if not self._can_decide(leave, approver_id, approver_role):
            raise AuthorizationError("You are not an approver for this leave")
        if leave.status != LeaveStatus.PENDING:
            raise ValidationError("Only pending leaves can be approved or rejected")

        now = now or now_local()
        if not self._leaves.set_decision(leave.id, status=decision, decided_by=approver_id, decided_at=now):
            raise ValidationError("Only pending leaves can be approved or rejected")

        decided = replace(leave, status=decision, decided_by=approver_id, decided_at=now)
        logger.info("Leave %s %s by %s", leave.id, decision.value, approver_id)
        if decision == LeaveStatus.APPROVED:
            self._on_approved(decided)
        return decided

    def balance(
        self,
        *,
        current_user_id: str,
        current_role: Role,
        user_id: Optional[str] = None,
        today: date | None = None,
    ) -> list[dict[str, Any]]:
        target = user_id or current_user_id
        if target != current_user_id and current_role not in _APPROVER_ROLES:
            raise AuthorizationError("You can only view your own leave balance")

        profile = self._get_profile(target, "Profile not found")
        if not profile.department:
            return []

        cycle = self._settings.current_cycle(today)
        taken = self._leaves.list_for_user(target, LeaveStatus.APPROVED)

        balances = []
        for limit in self._limits.list_limits(profile.department):
            used = used_days(taken, limit.leave_type, cycle, {LeaveStatus.APPROVED})
            balances.append(
                {
                    "leave_type": limit.leave_type,
                    "limit": limit.limit_days,
                    "used": used,
                    "remaining": max(0.0, limit.limit_days - used),
                    "is_paid": limit.is_paid,
                }
            )
        return balances

    def list_own(self, user_id: str, status: Optional[str] = None) -> Sequence[Leave]:
        status_e = None
        if status and status != "all":
            try:
                status_e = LeaveStatus(status)
            except ValueError:
                raise ValidationError("Invalid status filter")
        return self._leaves.list_for_user(user_id, status_e)

    def list_pending(self, *, approver_id: str, approver_role: Role) -> Sequence[LeaveListRow]:
        if approver_role in (Role.ADMIN, Role.HR):
            return self._leaves.list_pending()
        if approver_role == Role.MANAGER:
            return self._leaves.list_pending(approver_id)
        return []


def _leave_id(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid leave id")
