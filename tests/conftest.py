from types import SimpleNamespace

import pytest

from src.leavedesk.leavedesk.attendance.service import AttendanceService
from src.leavedesk.leavedesk.core.enums import Role
from src.leavedesk.leavedesk.departments.model import LeaveLimit
from src.leavedesk.leavedesk.departments.service import DepartmentService
from src.leavedesk.leavedesk.holidays.service import HolidayService
from src.leavedesk.leavedesk.leaves.service import LeaveService
from src.leavedesk.leavedesk.locations.model import OfficeLocation
from src.leavedesk.leavedesk.locations.service import LocationService
from src.leavedesk.leavedesk.main import create_app
from src.leavedesk.leavedesk.profiles.service import AuthService, ProfileService
from src.leavedesk.leavedesk.reports.service import AnalyticsReportService, ComplianceReportService
from src.leavedesk.leavedesk.settings.service import SettingsService
from tests.fakes import (
    InMemoryAttendance,
    InMemoryHolidays,
    InMemoryLeaves,
    InMemoryLimits,
    InMemoryLocations,
    InMemoryPolicies,
    InMemoryProfiles,
    InMemorySettings,
    make_profile,
)


@pytest.fixture
def container():
    """Service graph over in-memory repositories, shaped like build_container()."""

    profiles = InMemoryProfiles(
        make_profile("emp", managers=("mgr",)),
        make_profile("mgr", role=Role.MANAGER),
        make_profile("hr", role=Role.HR, department="HR"),
        make_profile("root", role=Role.ADMIN),
    )
    limits = InMemoryLimits(LeaveLimit("Engineering", "Casual", 5))
    attendance = InMemoryAttendance(profiles=profiles)
    leaves = InMemoryLeaves(profiles=profiles)
    locations = InMemoryLocations(OfficeLocation(id=1, name="HQ", latitude=12.9716, longitude=77.5946, radius=150))
    holidays = InMemoryHolidays()

    settings_service = SettingsService(InMemorySettings())
    attendance_service = AttendanceService(attendance, profiles, leaves, locations, holidays=holidays)

    return SimpleNamespace(
        profiles_repo=profiles,
        attendance_repo=attendance,
        leaves_repo=leaves,
        holidays_repo=holidays,
        auth_service=AuthService(profiles),
        profile_service=ProfileService(profiles),
        department_service=DepartmentService(limits, InMemoryPolicies(), profiles),
        settings_service=settings_service,
        location_service=LocationService(locations),
        attendance_service=attendance_service,
        leave_service=LeaveService(leaves, profiles, limits, settings_service, attendance_service),
        holiday_service=HolidayService(holidays),
        compliance_report_service=ComplianceReportService(profiles, attendance, leaves),
        analytics_report_service=AnalyticsReportService(profiles, attendance, leaves),
    )


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(user_id: str):
        res = client.post("/api/auth/login", json={"email": f"{user_id}@example.com", "password": "secret123"})
        assert res.status_code == 200
        return res.get_json()

    return _login
