from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class LeaveLimit:
    """Annual quota of one leave type for one department."""

    department: str
    leave_type: str
    limit_days: float
    color: Optional[str] = None
    is_paid: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "department": self.department,
            "leave_type": self.leave_type,
            "limit_days": self.limit_days,
            "color": self.color,
            "is_paid": self.is_paid,
        }


@dataclass(frozen=True)
class DepartmentPolicy:
    department: str
    is_enabled: bool = False
    policy_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"department": self.department, "is_enabled": self.is_enabled, "policy_url": self.policy_url}
