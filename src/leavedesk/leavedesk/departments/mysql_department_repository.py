from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, placeholders
from .model import DepartmentPolicy, LeaveLimit
from .repository import DepartmentPolicyRepository, LeaveLimitRepository


def _to_limit(r: dict) -> LeaveLimit:
    return LeaveLimit(
        department=r["department"],
        leave_type=r["leave_type"],
        limit_days=as_float(r.get("limit_days")) or 0.0,
        color=r.get("color"),
        is_paid=bool(r.get("is_paid")),
    )


class MySQLLeaveLimitRepository(LeaveLimitRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_limits(self, department: Optional[str] = None) -> Sequence[LeaveLimit]:
        sql = "SELECT department, leave_type, limit_days, color, is_paid FROM department_leave_limits"
        params: tuple = ()
        if department is not None:
            sql += " WHERE department=%s"
            params = (department,)
        sql += " ORDER BY id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_limit(r) for r in fetchall(cur)]

    def get_limit(self, department: str, leave_type: str) -> Optional[LeaveLimit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT department, leave_type, limit_days, color, is_paid
                FROM department_leave_limits
                WHERE department=%s AND leave_type=%s
                """,
                (department, leave_type),
            )
            r = fetchone(cur)
            return _to_limit(r) if r else None

    def list_departments(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT department FROM department_leave_limits")
            return [r["department"] for r in fetchall(cur)]

    def replace_department_limits(self, department: str, limits: Sequence[LeaveLimit]) -> int:
        keep = [l.leave_type for l in limits]
        sql = "DELETE FROM department_leave_limits WHERE department=%s"
        params: list[object] = [department]
        if keep:
            sql += f" AND leave_type NOT IN ({placeholders(keep)})"
            params.extend(keep)

        # Delete and upsert share one transaction.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            removed = cur.rowcount
            if limits:
                cur.executemany(
                    """
                    INSERT INTO department_leave_limits(department, leave_type, limit_days, color, is_paid)
                    VALUES(%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE limit_days=VALUES(limit_days), color=VALUES(color), is_paid=VALUES(is_paid)
                    """,
                    [(l.department, l.leave_type, l.limit_days, l.color, 1 if l.is_paid else 0) for l in limits],
                )
            return removed


class MySQLDepartmentPolicyRepository(DepartmentPolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[DepartmentPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department, is_enabled, policy_url FROM department_policies ORDER BY department")
            return [
                DepartmentPolicy(
                    department=r["department"],
                    is_enabled=bool(r.get("is_enabled")),
                    policy_url=r.get("policy_url") or "",
                )
                for r in fetchall(cur)
            ]

    def upsert(self, policy: DepartmentPolicy) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO department_policies(department, is_enabled, policy_url)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE is_enabled=VALUES(is_enabled), policy_url=VALUES(policy_url)
                """,
                (policy.department, 1 if policy.is_enabled else 0, policy.policy_url),
            )
