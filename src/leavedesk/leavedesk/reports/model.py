from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.constants import (
    SCORE_PER_ABSENCE,
    SCORE_PER_LEAVE,
    SCORE_PER_MISSED_CHECKOUT,
    SCORE_PER_SHORTFALL_HOUR,
)


@dataclass
class ComplianceStats:
    """Per-employee tallies for one month (mutable while aggregating)."""

    user: dict[str, Any]
    leaves: int = 0
    absent: int = 0
    missed_checkout: int = 0
    present: int = 0
    overtime_minutes: int = 0
    shortfall_minutes: int = 0

    @property
    def total_score(self) -> float:
        """Violation score, higher is worse."""
        return (
            self.absent * SCORE_PER_ABSENCE
            + self.missed_checkout * SCORE_PER_MISSED_CHECKOUT
            + self.leaves * SCORE_PER_LEAVE
            + (self.shortfall_minutes / 60) * SCORE_PER_SHORTFALL_HOUR
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "user": self.user,
            "leaves": self.leaves,
            "absent": self.absent,
            "missedCheckout": self.missed_checkout,
            "present": self.present,
            "overtimeMinutes": self.overtime_minutes,
            "shortfallMinutes": self.shortfall_minutes,
            "totalScore": self.total_score,
        }

    def to_csv_row(self) -> dict[str, Any]:
        return {
            "user_id": self.user.get("id"),
            "full_name": self.user.get("full_name"),
            "department": self.user.get("department") or "-",
            "designation": self.user.get("designation") or "-",
            "present": self.present,
            "absent": self.absent,
            "leaves": self.leaves,
            "missed_checkout": self.missed_checkout,
            "overtime_minutes": self.overtime_minutes,
            "shortfall_minutes": self.shortfall_minutes,
            "total_score": round(self.total_score, 2),
        }


@dataclass(frozen=True)
class CompliancePage:
    rows: list[ComplianceStats]
    total: int
    page: int
    limit: int
    month: int
    year: int
    report_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [r.to_dict() for r in self.rows],
            "meta": {
                "total": self.total,
                "page": self.page,
                "limit": self.limit,
                "month": self.month,
                "year": self.year,
                "type": self.report_type,
            },
        }


@dataclass
class DayCounts:
    present: int = 0
    late: int = 0
    absent: int = 0
    leave: int = 0


@dataclass
class DepartmentCounts:
    present: int = 0
    working_days: int = 0


@dataclass(frozen=True)
class AnalyticsReport:
    kpi: dict[str, Any]
    status_distribution: list[dict[str, Any]]
    leave_distribution: list[dict[str, Any]]
    daily_trend: list[dict[str, Any]]
    dept_performance: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kpi": self.kpi,
            "statusDistribution": self.status_distribution,
            "leaveDistribution": self.leave_distribution,
            "dailyTrend": self.daily_trend,
            "deptPerformance": self.dept_performance,
        }
