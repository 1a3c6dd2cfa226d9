from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Union

_DATETIME_KEY = "__datetime__"


class _DocumentEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        if isinstance(o, datetime):
            return {_DATETIME_KEY: o.isoformat()}
        return super().default(o)


def _object_hook(obj: dict) -> Any:
    if len(obj) == 1 and _DATETIME_KEY in obj:
        return datetime.fromisoformat(obj[_DATETIME_KEY])
    return obj


def encode_body(data: dict) -> str:
    return json.dumps(data, cls=_DocumentEncoder, ensure_ascii=False)


def decode_body(raw: Union[str, bytes, bytearray, dict, None]) -> dict:
    """Decode a JSON column value.

    mysql-connector can return JSON columns as str, bytes or bytearray.
    """
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    return json.loads(raw, object_hook=_object_hook) or {}
