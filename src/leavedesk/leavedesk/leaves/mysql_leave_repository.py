from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveSession, LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_float, db_cursor, fetchall, fetchone
from .model import Leave, LeaveListRow
from .repository import LeaveRepository

_COLUMNS = """
    l.id, l.user_id, l.type, l.start_date, l.end_date, l.reason, l.status, l.approver_id,
    l.duration, l.session, l.decided_by, l.decided_at, l.created_at
"""


def _to_leave(r: dict) -> Leave:
    return Leave(
        id=int(r["id"]),
        user_id=str(r["user_id"]),
        leave_type=r["type"],
        start_date=as_date(r["start_date"]),
        end_date=as_date(r["end_date"]),
        reason=r.get("reason"),
        status=LeaveStatus(r["status"]),
        approver_id=r.get("approver_id"),
        duration=as_float(r.get("duration")),
        session=LeaveSession(r.get("session") or LeaveSession.FULL_DAY.value),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        created_at=r.get("created_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, leave_id: int) -> Optional[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leaves l WHERE l.id=%s", (leave_id,))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_for_user(self, user_id: str, status: Optional[LeaveStatus] = None) -> Sequence[Leave]:
        sql = f"SELECT {_COLUMNS} FROM leaves l WHERE l.user_id=%s"
        params: list[object] = [user_id]
        if status is not None:
            sql += " AND l.status=%s"
            params.append(status.value)
        sql += " ORDER BY l.created_at DESC, l.id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_leave(r) for r in fetchall(cur)]

    def list_overlapping(self, user_id: str, start_date: date, end_date: date) -> Sequence[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leaves l
                WHERE l.user_id=%s AND l.status<>%s AND l.start_date<=%s AND l.end_date>=%s
                """,
                (user_id, LeaveStatus.REJECTED.value, end_date, start_date),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_approved_in_range(self, start_date: date, end_date: date) -> Sequence[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leaves l
                WHERE l.status=%s AND l.start_date<=%s AND l.end_date>=%s
                ORDER BY l.start_date
                """,
                (LeaveStatus.APPROVED.value, end_date, start_date),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_pending(self, approver_id: Optional[str] = None) -> Sequence[LeaveListRow]:
        sql = f"""
            SELECT {_COLUMNS}, p.full_name, p.department, p.avatar_url
            FROM leaves l
            JOIN profiles p ON p.id = l.user_id
            WHERE l.status=%s
        """
        params: list[object] = [LeaveStatus.PENDING.value]
        if approver_id is not None:
            sql += " AND (l.approver_id=%s OR JSON_CONTAINS(p.reporting_managers, JSON_QUOTE(%s)))"
            params.extend([approver_id, approver_id])
        sql += " ORDER BY l.created_at"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                LeaveListRow(
                    leave=_to_leave(r),
                    requester={
                        "id": str(r["user_id"]),
                        "full_name": r["full_name"],
                        "department": r.get("department"),
                        "avatar_url": r.get("avatar_url"),
                    },
                )
                for r in fetchall(cur)
            ]

    def create(self, leave: Leave) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(user_id, type, start_date, end_date, reason, status, approver_id,
                                   duration, session, decided_by, decided_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    leave.user_id,
                    leave.leave_type,
                    leave.start_date,
                    leave.end_date,
                    leave.reason,
                    leave.status.value,
                    leave.approver_id,
                    leave.duration,
                    leave.session.value,
                    leave.decided_by,
                    leave.decided_at,
                ),
            )
            return int(cur.lastrowid)

    def delete_by_id(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leaves WHERE id=%s", (leave_id,))
            return cur.rowcount > 0

    def set_decision(self, leave_id: int, *, status: LeaveStatus, decided_by: str, decided_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leaves SET status=%s, decided_by=%s, decided_at=%s WHERE id=%s AND status=%s",
                (status.value, decided_by, decided_at, leave_id, LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0
