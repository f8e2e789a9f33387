from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import AttendanceListRow, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    a.id, a.user_id, a.date, a.status, a.check_in, a.check_out,
    a.duration_minutes, a.deviation_minutes, a.location_snapshot
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(r["id"]),
        user_id=str(r["user_id"]),
        work_date=as_date(r["date"]),
        status=r["status"],
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        duration_minutes=r.get("duration_minutes"),
        deviation_minutes=r.get("deviation_minutes"),
        location_snapshot=load_json(r.get("location_snapshot"), {}) or {},
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance a WHERE a.user_id=%s AND a.date=%s", (user_id, work_date))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_user(self, user_id: str, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                WHERE a.user_id=%s AND a.date BETWEEN %s AND %s
                ORDER BY a.date
                """,
                (user_id, start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_in_range(self, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance a WHERE a.date BETWEEN %s AND %s ORDER BY a.date",
                (start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(self, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(user_id, date, status, check_in, location_snapshot)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    record.user_id,
                    record.work_date,
                    record.status,
                    record.check_in,
                    dump_json(record.location_snapshot),
                ),
            )
            return int(cur.lastrowid)

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out: datetime,
        duration_minutes: int,
        deviation_minutes: int,
        location_snapshot: dict,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out=%s, duration_minutes=%s, deviation_minutes=%s, location_snapshot=%s
                WHERE id=%s
                """,
                (check_out, duration_minutes, deviation_minutes, dump_json(location_snapshot), attendance_id),
            )
            return cur.rowcount > 0

    def upsert_day(self, record: AttendanceRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(user_id, date, status, check_in, check_out,
                                       duration_minutes, deviation_minutes, location_snapshot)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    check_in=VALUES(check_in),
                    check_out=VALUES(check_out),
                    duration_minutes=VALUES(duration_minutes),
                    deviation_minutes=VALUES(deviation_minutes),
                    location_snapshot=VALUES(location_snapshot)
                """,
                (
                    record.user_id,
                    record.work_date,
                    record.status,
                    record.check_in,
                    record.check_out,
                    record.duration_minutes,
                    record.deviation_minutes,
                    dump_json(record.location_snapshot),
                ),
            )

    def list_with_profiles(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        department: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Sequence[AttendanceListRow]:
        clauses = ["1=1"]
        params: list[object] = []
        if start_date:
            clauses.append("a.date >= %s")
            params.append(start_date)
        if end_date:
            clauses.append("a.date <= %s")
            params.append(end_date)
        if department:
            clauses.append("p.department = %s")
            params.append(department)
        if name:
            clauses.append("LOWER(p.full_name) LIKE %s")
            params.append(f"%{name.lower()}%")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS},
                       p.full_name, p.department, p.email, p.avatar_url, p.role, p.designation, p.work_config
                FROM attendance a
                JOIN profiles p ON p.id = a.user_id
                WHERE {' AND '.join(clauses)}
                ORDER BY a.date DESC
                """,
                tuple(params),
            )
            return [
                AttendanceListRow(
                    record=_to_record(r),
                    profile={
                        "id": str(r["user_id"]),
                        "full_name": r["full_name"],
                        "department": r.get("department"),
                        "email": r.get("email"),
                        "avatar_url": r.get("avatar_url"),
                        "role": r.get("role"),
                        "designation": r.get("designation"),
                        "work_config": load_json(r.get("work_config"), {}) or {},
                    },
                )
                for r in fetchall(cur)
            ]
