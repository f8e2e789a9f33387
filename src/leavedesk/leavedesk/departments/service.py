from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..profiles.repository import ProfileRepository
from .model import DepartmentPolicy, LeaveLimit
from .repository import DepartmentPolicyRepository, LeaveLimitRepository

logger = logging.getLogger(__name__)


def distinct_departments(values: Iterable[Optional[str]]) -> list[str]:
    """Sorted, trimmed, non-empty, de-duplicated department names."""
    return sorted({v.strip() for v in values if v and v.strip()})


def dedupe_leave_types(limits: Sequence[LeaveLimit]) -> list[LeaveLimit]:
    """One entry per leave_type: first-seen order, last-seen values."""
    by_type: dict[str, LeaveLimit] = {}
    for limit in limits:
        by_type[limit.leave_type] = limit
    return list(by_type.values())


def _parse_limit(department: str, raw: Any) -> LeaveLimit:
    if not isinstance(raw, dict):
        raise ValidationError("Invalid request body")
    leave_type = require_non_empty(raw.get("leave_type"), "Leave type")
    try:
        limit_days = float(raw.get("limit_days", 0) or 0)
    except (TypeError, ValueError):
        raise ValidationError(f"Limit for {leave_type} must be a number")
    if limit_days < 0:
        raise ValidationError(f"Limit for {leave_type} cannot be negative")
    return LeaveLimit(
        department=department,
        leave_type=leave_type,
        limit_days=limit_days,
        color=raw.get("color") or None,
        is_paid=bool(raw.get("is_paid", True)),
    )


class DepartmentService:
    """Departments, per-department leave limits and leave policies."""

    def __init__(
        self,
        limits: LeaveLimitRepository,
        policies: DepartmentPolicyRepository,
        profiles: ProfileRepository,
    ):
        self._limits = limits
        self._policies = policies
        self._profiles = profiles

    def list_departments(self) -> list[str]:
        values = list(self._limits.list_departments()) + list(self._profiles.list_department_values())
        return distinct_departments(values)

    def get_limits(self, department: Optional[str]) -> Sequence[LeaveLimit]:
        if not department:
            raise ValidationError("Department is required")
        return self._limits.list_limits(department)

    def save_limits(self, department: Optional[str], limits: Any) -> Sequence[LeaveLimit]:
        """Replace a department's limits with the submitted list."""

        if not department or not isinstance(limits, list):
            raise ValidationError("Invalid request body")

        parsed = [_parse_limit(department, raw) for raw in limits]
        removed = self._limits.replace_department_limits(department, parsed)
        logger.info("Saved %d leave limits for %s (%d removed)", len(parsed), department, removed)
        return self._limits.list_limits(department)

    def leave_types(self, department: Optional[str] = None) -> list[LeaveLimit]:
        if department == "all":
            department = None
        return dedupe_leave_types(self._limits.list_limits(department))

    def list_policies(self) -> list[DepartmentPolicy]:
        saved = {p.department: p for p in self._policies.list_all()}
        return [
            saved.get(name) or DepartmentPolicy(department=name)
            for name in distinct_departments(self._profiles.list_department_values())
        ]

    def save_policy(self, body: dict[str, Any]) -> DepartmentPolicy:
        department = require_non_empty(body.get("department"), "Department")
        policy = DepartmentPolicy(
            department=department,
            is_enabled=bool(body.get("is_enabled", False)),
            policy_url=(body.get("policy_url") or "").strip(),
        )
        self._policies.upsert(policy)
        logger.info("Saved policy for %s (enabled=%s)", department, policy.is_enabled)
        return policy
