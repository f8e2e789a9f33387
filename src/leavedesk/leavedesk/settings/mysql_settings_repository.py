from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT value FROM system_settings WHERE `key`=%s", (key,))
            r = fetchone(cur)
            return r.get("value") if r else None

    def get_many(self, keys: Sequence[str]) -> Mapping[str, Optional[str]]:
        if not keys:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT `key`, value FROM system_settings WHERE `key` IN ({placeholders(keys)})",
                tuple(keys),
            )
            return {r["key"]: r.get("value") for r in fetchall(cur)}

    def set(self, key: str, value: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO system_settings(`key`, value) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE value=VALUES(value)
                """,
                (key, value),
            )
