from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import OfficeLocation
from .repository import LocationRepository


def _to_location(r: dict) -> OfficeLocation:
    return OfficeLocation(
        id=int(r["id"]),
        name=r["name"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius=int(r["radius"]),
    )


class MySQLLocationRepository(LocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[OfficeLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, latitude, longitude, radius FROM office_locations ORDER BY id")
            return [_to_location(r) for r in fetchall(cur)]

    def get_by_id(self, location_id: int) -> Optional[OfficeLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, latitude, longitude, radius FROM office_locations WHERE id=%s", (location_id,))
            r = fetchone(cur)
            return _to_location(r) if r else None

    def create(self, location: OfficeLocation) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO office_locations(name, latitude, longitude, radius) VALUES(%s,%s,%s,%s)",
                (location.name, location.latitude, location.longitude, location.radius),
            )
            return int(cur.lastrowid)

    def update(self, location: OfficeLocation) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE office_locations SET name=%s, latitude=%s, longitude=%s, radius=%s WHERE id=%s",
                (location.name, location.latitude, location.longitude, location.radius, location.id),
            )
            cur.execute("SELECT 1 AS ok FROM office_locations WHERE id=%s", (location.id,))
            return fetchone(cur) is not None

    def delete_by_id(self, location_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM office_locations WHERE id=%s", (location_id,))
            return cur.rowcount > 0
