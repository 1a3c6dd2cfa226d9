from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: Mapping[str, Any]) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "student_portal")),
        )


class DatabaseConnection:
    """Connection factory for the document store.

    Every repository call opens its own short-lived connection; there is no
    pool and nothing is shared between requests.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def from_dict(cls, db_config: Mapping[str, Any]) -> "DatabaseConnection":
        return cls(DBConfig.from_dict(db_config))

    @property
    def database(self) -> str:
        return self._config.database

    def connect(self):
        return mysql.connector.connect(**asdict(self._config), charset="utf8mb4", use_pure=True)
