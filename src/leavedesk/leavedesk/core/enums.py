from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    ADMIN = "admin"
    HR = "hr"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Status stored on an attendance row."""

    AVAILABLE = "available"
    REMOTE = "remote"
    PRESENT = "present"
    LEAVE = "leave"
    ABSENT = "absent"


class CheckInMode(str, Enum):
    """How an employee checks in: from an office (geo-fenced) or remotely."""

    AVAILABLE = "available"
    REMOTE = "remote"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveSession(str, Enum):
    FULL_DAY = "full_day"
    FIRST_HALF = "first_half"
    SECOND_HALF = "second_half"


class WorkMode(str, Enum):
    FIXED = "fixed"
    FLEXIBLE = "flexible"


class ReportType(str, Enum):
    VIOLATORS = "violators"
    PERFORMERS = "performers"
