from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "leavedesk")),
        )


class DatabaseConnection:
    """Opens a fresh MySQL connection per repository operation.

    One factory is kept per distinct DBConfig (see ``for_config``).
    """

    _factories: ClassVar[dict[DBConfig, "DatabaseConnection"]] = {}

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def for_config(cls, config: DBConfig) -> "DatabaseConnection":
        if config not in cls._factories:
            cls._factories[config] = cls(config)
        return cls._factories[config]

    def connect(self, *, with_database: bool = True):
        kwargs = {
            "host": self.config.host,
            "port": self.config.port,
            "user": self.config.user,
            "password": self.config.password,
            "use_pure": True,
        }
        if with_database:
            kwargs["database"] = self.config.database
        return mysql.connector.connect(**kwargs)
