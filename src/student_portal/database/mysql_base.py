from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection) -> Iterator[Any]:
    """Dictionary cursor in its own transaction.

    Commits when the block exits normally, rolls back on any exception.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=True)
    try:
        yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetch_rows(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])
