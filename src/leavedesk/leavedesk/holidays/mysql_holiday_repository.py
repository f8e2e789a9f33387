from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, dump_json, fetchall, load_json
from .model import Holiday
from .repository import HolidayRepository


def _to_holiday(r: dict) -> Holiday:
    departments = load_json(r.get("departments"))
    return Holiday(
        id=int(r["id"]),
        name=r["name"],
        holiday_date=as_date(r["date"]),
        departments=tuple(departments) if departments else None,
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_between(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Sequence[Holiday]:
        where, params = [], []
        if start_date is not None:
            where.append("date >= %s")
            params.append(start_date)
        if end_date is not None:
            where.append("date <= %s")
            params.append(end_date)
        sql = "SELECT id, name, date, departments FROM holidays"
        if where:
            sql += " WHERE " + " AND ".join(where)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY date, id", tuple(params))
            return [_to_holiday(r) for r in fetchall(cur)]

    def create(self, holiday: Holiday) -> int:
        departments = list(holiday.departments) if holiday.departments else None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays(name, date, departments) VALUES(%s,%s,%s)",
                (holiday.name, holiday.holiday_date, dump_json(departments)),
            )
            return int(cur.lastrowid)

    def delete_by_id(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE id=%s", (holiday_id,))
            return cur.rowcount > 0
