from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from .attendance.factory import CheckInStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_LATE_AFTER
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentPolicyRepository, MySQLLeaveLimitRepository
from .departments.service import DepartmentService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .locations.mysql_location_repository import MySQLLocationRepository
from .locations.service import LocationService
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.service import AuthService, ProfileService
from .reports.service import AnalyticsReportService, ComplianceReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    profiles_repo: MySQLProfileRepository
    limits_repo: MySQLLeaveLimitRepository
    policies_repo: MySQLDepartmentPolicyRepository
    settings_repo: MySQLSettingsRepository
    locations_repo: MySQLLocationRepository
    attendance_repo: MySQLAttendanceRepository
    leaves_repo: MySQLLeaveRepository
    holidays_repo: MySQLHolidayRepository

    auth_service: AuthService
    profile_service: ProfileService
    department_service: DepartmentService
    settings_service: SettingsService
    location_service: LocationService
    attendance_service: AttendanceService
    leave_service: LeaveService
    holiday_service: HolidayService
    compliance_report_service: ComplianceReportService
    analytics_report_service: AnalyticsReportService


def build_container(*, db_config: dict, late_after: time = DEFAULT_LATE_AFTER) -> Container:
    conn = DatabaseConnection.for_config(DBConfig.from_dict(db_config))

    profiles_repo = MySQLProfileRepository(conn)
    limits_repo = MySQLLeaveLimitRepository(conn)
    policies_repo = MySQLDepartmentPolicyRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    locations_repo = MySQLLocationRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)

    settings_service = SettingsService(settings_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        profiles_repo,
        leaves_repo,
        locations_repo,
        strategy_factory=CheckInStrategyFactory(),
        holidays=holidays_repo,
    )

    return Container(
        conn=conn,
        profiles_repo=profiles_repo,
        limits_repo=limits_repo,
        policies_repo=policies_repo,
        settings_repo=settings_repo,
        locations_repo=locations_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        holidays_repo=holidays_repo,
        auth_service=AuthService(profiles_repo),
        profile_service=ProfileService(profiles_repo),
        department_service=DepartmentService(limits_repo, policies_repo, profiles_repo),
        settings_service=settings_service,
        location_service=LocationService(locations_repo),
        attendance_service=attendance_service,
        leave_service=LeaveService(leaves_repo, profiles_repo, limits_repo, settings_service, attendance_service),
        holiday_service=HolidayService(holidays_repo),
        compliance_report_service=ComplianceReportService(profiles_repo, attendance_repo, leaves_repo),
        analytics_report_service=AnalyticsReportService(
            profiles_repo, attendance_repo, leaves_repo, late_after=late_after
        ),
    )
