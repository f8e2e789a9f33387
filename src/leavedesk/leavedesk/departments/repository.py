from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import DepartmentPolicy, LeaveLimit


class LeaveLimitRepository(Protocol):
    def list_limits(self, department: Optional[str] = None) -> Sequence[LeaveLimit]:
        raise NotImplementedError

    def get_limit(self, department: str, leave_type: str) -> Optional[LeaveLimit]:
        raise NotImplementedError

    def list_departments(self) -> Sequence[str]:
        raise NotImplementedError

    def replace_department_limits(self, department: str, limits: Sequence[LeaveLimit]) -> int:
        """Delete the department's unlisted types and upsert the rest, atomically.

        Returns the number of deleted rows.
        """
        raise NotImplementedError


class DepartmentPolicyRepository(Protocol):
    def list_all(self) -> Sequence[DepartmentPolicy]:
        raise NotImplementedError

    def upsert(self, policy: DepartmentPolicy) -> None:
        raise NotImplementedError
