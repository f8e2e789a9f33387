import json
from datetime import date, datetime

import pytest

from src.leavedesk.leavedesk.attendance.service import AttendanceService
from src.leavedesk.leavedesk.core.enums import LeaveSession, LeaveStatus, Role
from src.leavedesk.leavedesk.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.leavedesk.leavedesk.departments.model import LeaveLimit
from src.leavedesk.leavedesk.leaves.model import Leave
from src.leavedesk.leavedesk.leaves.service import LeaveService
from src.leavedesk.leavedesk.settings.service import SettingsService
from tests.fakes import (
    InMemoryAttendance,
    InMemoryLeaves,
    InMemoryLimits,
    InMemoryLocations,
    InMemoryProfiles,
    InMemorySettings,
    make_profile,
)

NOW = datetime(2025, 6, 2, 10, 0)


class World:
    def __init__(self, *leaves, reset_date=None):
        self.profiles = InMemoryProfiles(
            make_profile("emp", managers=("mgr",)),
            make_profile("mgr", role=Role.MANAGER),
            make_profile("other-mgr", role=Role.MANAGER),
            make_profile("hr", role=Role.HR, department="HR"),
            make_profile("boss", role=Role.ADMIN, department="Engineering"),
            make_profile("drifter", department=None),
        )
        self.limits = InMemoryLimits(
            LeaveLimit("Engineering", "Casual", 5),
            LeaveLimit("Engineering", "Half Day", 2, is_paid=False),
        )
        settings = InMemorySettings(**({"leave_reset_date": reset_date} if reset_date else {}))
        self.attendance = InMemoryAttendance(profiles=self.profiles)
        self.leaves = InMemoryLeaves(*leaves, profiles=self.profiles)
        attendance_svc = AttendanceService(self.attendance, self.profiles, self.leaves, InMemoryLocations())
        self.svc = LeaveService(self.leaves, self.profiles, self.limits, SettingsService(settings), attendance_svc)

    def apply(self, user="emp", role=Role.EMPLOYEE, **body):
        payload = {"type": "Casual", "startDate": "2025-06-10", "endDate": "2025-06-11", "approverId": "mgr"}
        payload.update(body)
        return self.svc.apply(current_user_id=user, current_role=role, body=payload, now=NOW)


def _existing(start, end, status=LeaveStatus.APPROVED, leave_type="Casual", duration=None, user="emp"):
    return Leave(
        id=None,
        user_id=user,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        status=status,
        duration=duration,
    )


def test_apply_creates_pending_leave_with_inclusive_days():
    world = World()
    leave = world.apply()
    assert leave.status == LeaveStatus.PENDING
    assert leave.duration == 2
    assert leave.approver_id == "mgr"
    assert leave.session == LeaveSession.FULL_DAY


def test_apply_validates_required_fields_and_range():
    world = World()
    with pytest.raises(ValidationError, match="Missing required fields"):
        world.apply(type="")
    with pytest.raises(ValidationError, match="End date cannot be before"):
        world.apply(startDate="2025-06-12", endDate="2025-06-11")
    with pytest.raises(NotFoundError):
        world.apply(user="ghost", role=Role.ADMIN, userId="ghost")


def test_only_admin_or_hr_may_apply_for_someone_else():
    world = World()
    with pytest.raises(AuthorizationError):
        world.apply(user="mgr", role=Role.MANAGER, userId="emp")
    assert world.apply(user="hr", role=Role.HR, userId="emp").user_id == "emp"


def test_half_day_uses_half_a_day_and_a_session():
    world = World()
    leave = world.apply(type="Half Day", startDate="2025-06-10", endDate="2025-06-10")
    assert leave.duration == 0.5
    assert leave.session == LeaveSession.FIRST_HALF

    with pytest.raises(ValidationError, match="Invalid session"):
        world.apply(type="Half Day", startDate="2025-06-20", endDate="2025-06-20", session="evening")


def test_overlap_messages_depend_on_existing_status():
    world = World(_existing(date(2025, 6, 11), date(2025, 6, 12), status=LeaveStatus.PENDING))
    with pytest.raises(ValidationError, match="already have a leave request"):
        world.apply()

    world = World(_existing(date(2025, 6, 9), date(2025, 6, 10)))
    with pytest.raises(ValidationError, match="already approved"):
        world.apply()

    world = World(_existing(date(2025, 6, 10), date(2025, 6, 11), status=LeaveStatus.REJECTED))
    world.apply()


def test_limit_counts_pending_and_approved_in_cycle():
    world = World(
        _existing(date(2025, 3, 3), date(2025, 3, 4)),
        _existing(date(2025, 4, 1), date(2025, 4, 1), status=LeaveStatus.PENDING),
        _existing(date(2025, 5, 1), date(2025, 5, 9), status=LeaveStatus.REJECTED),
        _existing(date(2024, 12, 30), date(2024, 12, 31)),
    )
    with pytest.raises(ValidationError) as exc:
        world.apply(startDate="2025-06-10", endDate="2025-06-12")
    assert str(exc.value) == (
        "Leave limit exceeded. You have used 3 of 5 Casual leaves. Requesting 3 days would exceed the limit."
    )
    assert world.apply(startDate="2025-06-10", endDate="2025-06-11").duration == 2


def test_leaves_before_reset_date_do_not_count():
    world = World(_existing(date(2025, 2, 3), date(2025, 2, 7)), reset_date="2025-03-01")
    world.apply(startDate="2025-06-09", endDate="2025-06-13")


def test_no_department_means_no_limit():
    world = World()
    leave = world.apply(user="drifter", startDate="2025-06-01", endDate="2025-06-30")
    assert leave.duration == 30


def test_admin_leave_is_auto_approved_and_marks_attendance():
    world = World()
    leave = world.apply(user="boss", role=Role.ADMIN, startDate="2025-06-10", endDate="2025-06-12")

    assert leave.status == LeaveStatus.APPROVED
    assert leave.approver_id == "boss" and leave.decided_by == "boss"
    for day in (10, 11, 12):
        assert world.attendance.get_for_user_and_date("boss", date(2025, 6, day)).status == "leave"


def test_cancel_rules():
    world = World(_existing(date(2025, 6, 1), date(2025, 6, 1)))
    pending = world.apply()

    with pytest.raises(AuthorizationError):
        world.svc.cancel(current_user_id="mgr", leave_id=pending.id)
    with pytest.raises(ValidationError, match="Only pending"):
        world.svc.cancel(current_user_id="emp", leave_id=1)
    with pytest.raises(NotFoundError):
        world.svc.cancel(current_user_id="emp", leave_id=99)

    world.svc.cancel(current_user_id="emp", leave_id=str(pending.id), owner_id="emp")
    assert world.leaves.get_by_id(pending.id) is None


def test_manager_approval_marks_each_day_as_leave():
    world = World()
    leave = world.apply(startDate="2025-06-10", endDate="2025-06-12")

    decided = world.svc.decide(approver_id="mgr", approver_role=Role.MANAGER, leave_id=leave.id, status="approved", now=NOW)

    assert decided.status == LeaveStatus.APPROVED
    stored = world.leaves.get_by_id(leave.id)
    assert (stored.decided_by, stored.decided_at) == ("mgr", NOW)
    assert [world.attendance.get_for_user_and_date("emp", date(2025, 6, d)).status for d in (10, 11, 12)] == ["leave"] * 3


def test_decide_guards():
    world = World()
    leave = world.apply()

    with pytest.raises(ValidationError, match="Missing required fields"):
        world.svc.decide(approver_id="mgr", approver_role=Role.MANAGER, leave_id=None, status="approved")
    with pytest.raises(ValidationError, match="approved or rejected"):
        world.svc.decide(approver_id="mgr", approver_role=Role.MANAGER, leave_id=leave.id, status="pending")
    with pytest.raises(AuthorizationError):
        world.svc.decide(approver_id="other-mgr", approver_role=Role.MANAGER, leave_id=leave.id, status="approved")
    with pytest.raises(AuthorizationError):
        world.svc.decide(approver_id="emp", approver_role=Role.EMPLOYEE, leave_id=leave.id, status="approved")
    with pytest.raises(NotFoundError):
        world.svc.decide(approver_id="hr", approver_role=Role.HR, leave_id=404, status="rejected")

    world.svc.decide(approver_id="hr", approver_role=Role.HR, leave_id=leave.id, status="rejected")
    assert world.attendance.get_for_user_and_date("emp", date(2025, 6, 10)) is None
    with pytest.raises(ValidationError, match="Only pending"):
        world.svc.decide(approver_id="hr", approver_role=Role.HR, leave_id=leave.id, status="approved")


def test_regularization_request_and_approval():
    world = World()
    leave = world.svc.submit_regularization(
        current_user_id="emp",
        current_role=Role.EMPLOYEE,
        body={"date": "2025-05-30", "checkIn": "09:15", "checkOut": "18:45", "reason": "Forgot", "approverId": "mgr"},
        now=NOW,
    )
    assert leave.leave_type == "Regularization"
    assert json.loads(leave.reason) == {
        "reason": "Forgot",
        "checkIn": "09:15",
        "checkOut": "18:45",
        "type": "regularization_request",
    }

    world.svc.decide(approver_id="mgr", approver_role=Role.MANAGER, leave_id=leave.id, status="approved", now=NOW)

    row = world.attendance.get_for_user_and_date("emp", date(2025, 5, 30))
    assert row.status == "present"
    assert row.check_in == datetime(2025, 5, 30, 9, 15)
    assert (row.duration_minutes, row.deviation_minutes) == (570, 30)


def test_regularization_times_must_be_ordered():
    world = World()
    with pytest.raises(ValidationError, match="Check-out time must be after"):
        world.svc.submit_regularization(
            current_user_id="emp",
            current_role=Role.EMPLOYEE,
            body={"date": "2025-05-30", "checkIn": "18:00", "checkOut": "09:00"},
        )


def test_balance_counts_only_approved_leaves():
    world = World(
        _existing(date(2025, 3, 3), date(2025, 3, 4)),
        _existing(date(2025, 3, 10), date(2025, 3, 10), status=LeaveStatus.PENDING),
        _existing(date(2025, 4, 1), date(2025, 4, 1), leave_type="Half Day"),
    )
    balances = world.svc.balance(current_user_id="emp", current_role=Role.EMPLOYEE, today=date(2025, 6, 2))
    assert balances == [
        {"leave_type": "Casual", "limit": 5, "used": 2, "remaining": 3, "is_paid": True},
        {"leave_type": "Half Day", "limit": 2, "used": 0.5, "remaining": 1.5, "is_paid": False},
    ]

    assert world.svc.balance(current_user_id="drifter", current_role=Role.EMPLOYEE) == []
    with pytest.raises(AuthorizationError):
        world.svc.balance(current_user_id="emp", current_role=Role.EMPLOYEE, user_id="mgr")
    with pytest.raises(NotFoundError):
        world.svc.balance(current_user_id="hr", current_role=Role.HR, user_id="ghost")


def test_pending_inbox_by_role():
    world = World()
    world.apply()
    world.apply(user="hr", role=Role.HR, startDate="2025-07-01", endDate="2025-07-01", approverId="boss")

    assert len(world.svc.list_pending(approver_id="hr", approver_role=Role.HR)) == 2
    assert len(world.svc.list_pending(approver_id="mgr", approver_role=Role.MANAGER)) == 1
    assert world.svc.list_pending(approver_id="emp", approver_role=Role.EMPLOYEE) == []


def test_list_own_filters_by_status():
    world = World(_existing(date(2025, 3, 3), date(2025, 3, 4)))
    world.apply()
    assert len(world.svc.list_own("emp")) == 2
    assert [l.status for l in world.svc.list_own("emp", "pending")] == [LeaveStatus.PENDING]
    with pytest.raises(ValidationError):
        world.svc.list_own("emp", "maybe")
