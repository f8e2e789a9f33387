from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import is_weekend, iter_days, month_bounds, now_local, round_half_up, sunday_based_weekday
from ..core.constants import DEFAULT_LATE_AFTER, DEFAULT_REPORT_PAGE_SIZE, HALF_DAY_LEAVE, UNASSIGNED_DEPARTMENT
from ..core.enums import AttendanceStatus, ReportType, Role
from ..core.exceptions import ValidationError
from ..leaves.model import Leave
from ..leaves.repository import LeaveRepository
from ..profiles.model import Profile
from ..profiles.repository import ProfileRepository
from .model import AnalyticsReport, CompliancePage, ComplianceStats, DayCounts, DepartmentCounts

logger = logging.getLogger(__name__)

PRESENT_LIKE_STATUSES = {"present", "wfh", "wfo", "working", "available", "remote"}


def _report_user(profile: Profile) -> dict:
    return {
        "id": profile.id,
        "full_name": profile.full_name,
        "department": profile.department,
        "avatar_url": profile.avatar_url,
        "role": profile.role.value,
        "designation": profile.designation,
        "work_config": profile.work_config,
    }


def leave_days_by_user(leaves: Sequence[Leave], start: date, end: date) -> dict[str, set[date]]:
    """Days inside [start, end] covered by each user's leaves."""

    days: dict[str, set[date]] = {}
    for leave in leaves:
        bucket = days.setdefault(leave.user_id, set())
        for day in iter_days(max(leave.start_date, start), min(leave.end_date, end)):
            bucket.add(day)
    return days


def violators_key(s: ComplianceStats):
    return (-s.absent, -s.shortfall_minutes, -s.missed_checkout, -s.total_score)


def performers_key(s: ComplianceStats):
    return (-s.present, s.absent, s.leaves, s.missed_checkout, -s.overtime_minutes)


class ComplianceReportService:
    """Monthly ranking of employees by attendance discipline."""

    def __init__(self, profiles: ProfileRepository, attendance: AttendanceRepository, leaves: LeaveRepository):
        self._profiles = profiles
        self._attendance = attendance
        self._leaves = leaves

    def _collect(
        self,
        profile: Profile,
        start: date,
        limit_day: date,
        today: date,
        present_rows: dict,
        leave_days: dict,
    ) -> ComplianceStats:
        stats = ComplianceStats(user=_report_user(profile))
        work = profile.work
        on_leave = leave_days.get(profile.id, set())

        for day in iter_days(start, limit_day):
            if not work.is_work_day(sunday_based_weekday(day)):
                continue

            record: Optional[AttendanceRecord] = present_rows.get((profile.id, day))
            if day in on_leave:
                stats.leaves += 1
            elif record:
                stats.present += 1
                if record.missed_checkout and day < today:
                    # Neutral: neither overtime nor shortfall.
                    stats.missed_checkout += 1
                elif record.deviation_minutes is not None:
                    if record.deviation_minutes > 0:
                        stats.overtime_minutes += record.deviation_minutes
                    else:
                        stats.shortfall_minutes += abs(record.deviation_minutes)
            elif day < today:
                stats.absent += 1
                stats.shortfall_minutes += work.expected_daily_minutes

        return stats

    def build(
        self,
        *,
        month: int,
        year: int,
        department: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[ComplianceStats]:
        """Every matching employee's stats, unsorted."""

        today = today or now_local().date()
        start, end = month_bounds(year, month)
        if department == "all":
            department = None

        profiles = self._profiles.list_profiles(exclude_role=Role.ADMIN, department=department)
        present_rows = {
            (r.user_id, r.work_date): r
            for r in self._attendance.list_in_range(start, end)
            if r.status != AttendanceStatus.ABSENT.value
        }
        leave_days = leave_days_by_user(self._leaves.list_approved_in_range(start, end), start, end)

        limit_day = min(today, end)
        return [self._collect(p, start, limit_day, today, present_rows, leave_days) for p in profiles]

    def ranked(
        self,
        *,
        month: int,
        year: int,
        report_type: str = ReportType.VIOLATORS.value,
        department: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[ComplianceStats]:
        try:
            kind = ReportType(report_type or ReportType.VIOLATORS.value)
        except ValueError:
            raise ValidationError("type must be violators or performers")

        rows = self.build(month=month, year=year, department=department, today=today)
        rows.sort(key=performers_key if kind == ReportType.PERFORMERS else violators_key)
        return rows

    def page(
        self,
        *,
        month: int,
        year: int,
        page: int = 1,
        limit: int = DEFAULT_REPORT_PAGE_SIZE,
        report_type: str = ReportType.VIOLATORS.value,
        department: Optional[str] = None,
        today: Optional[date] = None,
    ) -> CompliancePage:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")

        rows = self.ranked(month=month, year=year, report_type=report_type, department=department, today=today)
        offset = (page - 1) * limit
        return CompliancePage(
            rows=rows[offset:offset + limit],
            total=len(rows),
            page=page,
            limit=limit,
            month=month,
            year=year,
            report_type=report_type or ReportType.VIOLATORS.value,
        )


class AnalyticsReportService:
    """Organisation-wide monthly attendance KPIs and chart series."""

    def __init__(
        self,
        profiles: ProfileRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        *,
        late_after: time = DEFAULT_LATE_AFTER,
    ):
        self._profiles = profiles
        self._attendance = attendance
        self._leaves = leaves
        self._late_after = late_after

    def _is_late(self, record: AttendanceRecord) -> bool:
        return record.check_in is not None and record.check_in.time().replace(second=0, microsecond=0) > self._late_after

    @staticmethod
    def leave_breakdown(leaves: Sequence[Leave], start: date, end: date) -> dict[str, float]:
        counts: dict[str, float] = {}
        for leave in leaves:
            first, last = max(leave.start_date, start), min(leave.end_date, end)
            if first > last:
                continue
            days: float = (last - first).days + 1
            leave_type = leave.leave_type or "Other"
            if (leave.duration is not None and leave.duration < 1) or "half" in leave_type.lower():
                leave_type = HALF_DAY_LEAVE
                days = leave.duration if leave.duration is not None and leave.duration < 1 else 0.5
            counts[leave_type] = counts.get(leave_type, 0) + days
        return counts

    def build(self, *, month: int, year: int, today: Optional[date] = None) -> AnalyticsReport:
        today = today or now_local().date()
        start, end = month_bounds(year, month)
        limit_day = today if (today.year, today.month) == (year, month) else end

        profiles = self._profiles.list_profiles()
        records = {(r.user_id, r.work_date): r for r in self._attendance.list_in_range(start, end)}
        approved = self._leaves.list_approved_in_range(start, end)
        leave_days = leave_days_by_user(approved, start, end)

        present = late = absent = on_leave = 0
        daily = {day: DayCounts() for day in iter_days(start, limit_day)}
        departments: dict[str, DepartmentCounts] = {}

        for profile in profiles:
            dept = (profile.department or UNASSIGNED_DEPARTMENT).strip() or UNASSIGNED_DEPARTMENT
            counts = departments.setdefault(dept, DepartmentCounts())
            joined = profile.created_at.date() if profile.created_at else date(2000, 1, 1)

            for day in iter_days(start, limit_day):
                if day > today or day < joined or is_weekend(day):
                    continue
                counts.working_days += 1
                bucket = daily[day]

                record = records.get((profile.id, day))
                if record:
                    status = (record.status or "").lower()
                    if record.check_in is not None or status in PRESENT_LIKE_STATUSES:
                        present += 1
                        counts.present += 1
                        bucket.present += 1
                        if self._is_late(record):
                            late += 1
                            bucket.late += 1
                    elif status == AttendanceStatus.LEAVE.value:
                        on_leave += 1
                        bucket.leave += 1
                    elif status == AttendanceStatus.ABSENT.value:
                        absent += 1
                        bucket.absent += 1
                elif day in leave_days.get(profile.id, ()):
                    on_leave += 1
                    bucket.leave += 1
                else:
                    absent += 1
                    bucket.absent += 1

        by_type = self.leave_breakdown(approved, start, end)
        total_leave_days = sum(by_type.values())
        man_days = sum(c.working_days for c in departments.values())
        balanced_absent = max(0.0, man_days - present - total_leave_days)
        days_considered = limit_day.day

        kpi = {
            "totalEmployees": len(profiles),
            "avgDailyAttendance": int(round_half_up(present / days_considered)) if days_considered else 0,
            "avgAttendanceRate": int(round_half_up(present / man_days * 100)) if man_days else 0,
            "onTimeRate": int(round_half_up((present - late) / present * 100)) if present else 0,
            "totalLeaves": on_leave,
        }
        status_distribution = [
            {"name": "Present", "value": round_half_up(present, 1)},
            {"name": "Absent", "value": round_half_up(balanced_absent, 1)},
            {"name": "On Leave", "value": round_half_up(total_leave_days, 1)},
        ]
        leave_distribution = [{"name": name, "value": round_half_up(value, 1)} for name, value in by_type.items()]
        daily_trend = [
            {
                "date": day.day,
                "fullDate": day.isoformat(),
                "present": c.present - c.late,
                "late": c.late,
                "absent": c.absent,
                "leave": c.leave,
            }
            for day, c in daily.items()
        ]
        dept_performance = sorted(
            (
                {
                    "name": name,
                    "attendanceRate": int(round_half_up(c.present / c.working_days * 100)) if c.working_days else 0,
                }
                for name, c in departments.items()
            ),
            key=lambda d: d["attendanceRate"],
            reverse=True,
        )

        logger.debug("Analytics %04d-%02d: %d man-days, %d present, %d late", year, month, man_days, present, late)
        return AnalyticsReport(
            kpi=kpi,
            status_distribution=status_distribution,
            leave_distribution=leave_distribution,
            daily_trend=daily_trend,
            dept_performance=dept_performance,
        )
