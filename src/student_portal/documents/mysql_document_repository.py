from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

import mysql.connector

from ..common.datetime_utils import now_utc
from ..core.exceptions import StaleDocumentError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_rows
from .codec import decode_body, encode_body
from .merge import apply_merge
from .model import Document, Filter, OrderBy
from .repository import DocumentRepository

_FIELD_SEGMENT = re.compile(r"^[A-Za-z0-9_-]+$")


def _json_path(field: str) -> str:
    segments = field.split(".")
    if not segments or any(not _FIELD_SEGMENT.match(s) for s in segments):
        raise ValueError(f"Unsupported field path: {field!r}")
    return "$" + "".join(f'."{s}"' for s in segments)


class MySQLDocumentRepository(DocumentRepository):
    """Documents stored as JSON rows in the ``documents`` table.

    Merge writes lock the row, check the version and bump it, so a
    read-modify-write is atomic per document.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, clock: Callable[[], datetime] = now_utc):
        self._conn_factory = conn_factory
        self._clock = clock

    def _to_document(self, collection: str, r: dict) -> Document:
        return Document(
            collection=collection,
            doc_id=str(r["doc_id"]),
            data=decode_body(r.get("body")),
            version=int(r["version"]),
        )

    def get(self, collection: str, doc_id: str) -> Document:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                SELECT doc_id, body, version
                FROM documents
                WHERE collection=%s AND doc_id=%s
                """,
                (collection, doc_id),
            )
            r = cur.fetchone()
            if not r:
                return Document(collection=collection, doc_id=doc_id)
            return self._to_document(collection, r)

    def query(
        self,
        collection: str,
        *,
        filters: Sequence[Filter] = (),
        order_by: Sequence[OrderBy] = (),
        limit: Optional[int] = None,
    ) -> Sequence[Document]:
        clauses = ["collection=%s"]
        params: list[object] = [collection]

        for f in filters:
            path = _json_path(f.field)
            if f.op == "in":
                values = list(f.value)
                if not values:
                    return []
                ors = " OR ".join(["JSON_EXTRACT(body, %s) = CAST(%s AS JSON)"] * len(values))
                clauses.append(f"({ors})")
                for v in values:
                    params.extend([path, json.dumps(v)])
            elif f.op in ("==", ">=", "<="):
                op = "=" if f.op == "==" else f.op
                clauses.append(f"JSON_EXTRACT(body, %s) {op} CAST(%s AS JSON)")
                params.extend([path, json.dumps(f.value)])
            else:
                raise ValueError(f"Unsupported filter operator: {f.op!r}")

        order_sql = ""
        if order_by:
            parts = []
            for o in order_by:
                parts.append("JSON_EXTRACT(body, %s) " + ("DESC" if o.descending else "ASC"))
                params.append(_json_path(o.field))
            order_sql = "ORDER BY " + ", ".join(parts)

        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT doc_id, body, version
                FROM documents
                WHERE {where}
                {order_sql}
                {limit_sql}
                """,
                tuple(params),
            )
            return [self._to_document(collection, r) for r in fetch_rows(cur)]

    def merge(
        self,
        collection: str,
        doc_id: str,
        patch: Mapping[str, Any],
        *,
        expected_version: Optional[int] = None,
    ) -> Document:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                SELECT doc_id, body, version
                FROM documents
                WHERE collection=%s AND doc_id=%s
                FOR UPDATE
                """,
                (collection, doc_id),
            )
            r = cur.fetchone()
            current_version = int(r["version"]) if r else 0
            if expected_version is not None and int(expected_version) != current_version:
                raise StaleDocumentError()

            body = decode_body(r.get("body")) if r else {}
            merged = apply_merge(body, patch, server_time=self._clock())

            if r:
                cur.execute(
                    """
                    UPDATE documents
                    SET body=%s, version=version+1
                    WHERE collection=%s AND doc_id=%s AND version=%s
                    """,
                    (encode_body(merged), collection, doc_id, current_version),
                )
                if cur.rowcount == 0:
                    raise StaleDocumentError()
            else:
                try:
                    cur.execute(
                        """
                        INSERT INTO documents(collection, doc_id, body, version)
                        VALUES(%s,%s,%s,1)
                        """,
                        (collection, doc_id, encode_body(merged)),
                    )
                except mysql.connector.IntegrityError as e:
                    raise StaleDocumentError() from e

            return Document(collection=collection, doc_id=doc_id, data=merged, version=current_version + 1)

    def replace(self, collection: str, doc_id: str, data: dict) -> Document:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                INSERT INTO documents(collection, doc_id, body, version)
                VALUES(%s,%s,%s,1)
                ON DUPLICATE KEY UPDATE body=VALUES(body), version=version+1
                """,
                (collection, doc_id, encode_body(data)),
            )
        return self.get(collection, doc_id)
