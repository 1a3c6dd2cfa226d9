"""Create the database, apply schema/seed SQL and upsert demo students.

Used by ``create_app`` (AUTO_INIT_DB / AUTO_SEED_DB) and by ``scripts/``.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Optional

import mysql.connector

from ..accounts.document_account_repository import DocumentAccountRepository
from ..accounts.service import AuthService
from ..core.constants import STUDENTS_COLLECTION
from ..documents.mysql_document_repository import MySQLDocumentRepository
from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).resolve().parents[3] / "database"

DEMO_STUDENTS = (
    {
        "number": "9876543210",
        "password": "student123",
        "name": "Demo Student",
        "branch": "Bhayandar",
        "course": "BSc IT",
        "batch": "A",
        "year": "FY",
    },
    {
        "number": "9123456780",
        "password": "student123",
        "name": "Second Student",
        "branch": "Bhiwandi",
        "course": "BCom",
        "batch": "B",
        "year": "SY",
    },
)


@contextmanager
def _server_cursor(target: DBConfig, *, database: Optional[str] = None):
    kwargs = {"database": database} if database else {}
    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
        **kwargs,
    )
    try:
        cur = conn.cursor()
        yield cur
        conn.commit()
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # The target database name comes from settings, not from the SQL files.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?m)^\s*--.*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside of quoted strings."""
    buf: list[str] = []
    quote: Optional[str] = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            buf.pop()
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: Path) -> int:
    target = DBConfig.from_dict(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    count = 0
    with _server_cursor(target, database=target.database) as cur:
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _server_cursor(target) as cur:
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path = SQL_DIR / "schema.sql") -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, Path(schema_path))
    logger.info("Schema applied (%d statements) from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path = SQL_DIR / "seed.sql") -> None:
    count = _run_script(db_config, Path(seed_path))
    logger.info("Seed applied (%d statements) from %s", count, seed_path)


def ensure_demo_students(db_config: dict, students: Iterable[dict] = DEMO_STUDENTS) -> list[str]:
    """Upsert a login account and a ``students`` document per demo student."""
    documents = MySQLDocumentRepository(DatabaseConnection.from_dict(db_config))
    auth = AuthService(DocumentAccountRepository(documents))

    numbers = []
    for s in students:
        profile = {k: v for k, v in s.items() if k != "password"}
        auth.set_password(s["number"], s["password"])
        documents.replace(STUDENTS_COLLECTION, s["number"], profile)
        numbers.append(s["number"])

    logger.info("Demo students ready: %s", ", ".join(numbers))
    return numbers


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    with _server_cursor(target, database=target.database) as cur:
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
