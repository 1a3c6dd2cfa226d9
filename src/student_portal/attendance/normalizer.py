"""Attendance document normalization.

A ``studentattendance`` document may hold its days in two encodings:

A) nested:     ``{"days": {"2025-10-28": {"hasIn": true, ...}}}``
B) flattened:  ``{"days.2025-10-28.hasIn": true, ...}``

Both are read here into one canonical ``{date_key: DayEntry}`` map. Nested
values win when both encodings carry the same field; flags are the OR of the
explicit flag and the presence of the matching timestamp. Nothing outside
this module should look at the storage shape.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import try_from_millis
from ..common.validators import is_finite_number, is_number
from ..core.enums import PunchType
from .model import AttendanceSummary, DayEntry, DayStatus, GeoSnapshot, PunchLog, StudentAttendance


def as_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if is_finite_number(value):
        return try_from_millis(value)
    if isinstance(value, Mapping) and is_number(value.get("seconds")):
        nanos = value.get("nanoseconds") if is_number(value.get("nanoseconds")) else 0
        return try_from_millis(value["seconds"] * 1000 + nanos / 1_000_000)
    if isinstance(value, str) and value:
        try:
            return as_timestamp(datetime.fromisoformat(value))
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    return int(value) if is_finite_number(value) else None


def _as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


_FIELDS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "hasIn": ("has_in", bool),
    "hasOut": ("has_out", bool),
    "inAt": ("in_at", as_timestamp),
    "outAt": ("out_at", as_timestamp),
    "inAtMs": ("in_at_ms", _as_int),
    "outAtMs": ("out_at_ms", _as_int),
    "durationMin": ("duration_min", _as_int),
    "inPhoto": ("in_photo", _as_text),
    "outPhoto": ("out_photo", _as_text),
    "inLoc": ("in_loc", GeoSnapshot.from_dict),
    "outLoc": ("out_loc", GeoSnapshot.from_dict),
}
_FLAGS = ("has_in", "has_out")


def _route(entry: dict, name: str, raw_value: Any) -> None:
    """Put one stored field into *entry*; earlier (nested) values are kept."""
    if name not in _FIELDS:
        return
    attr, coerce = _FIELDS[name]
    value = coerce(raw_value)
    if attr in _FLAGS:
        entry[attr] = bool(entry.get(attr)) or value
    elif value is not None and entry.get(attr) is None:
        entry[attr] = value


def normalize_days(raw: Optional[Mapping[str, Any]]) -> dict[str, DayEntry]:
    """Canonical day map in the order date keys were first seen (not sorted)."""
    acc: dict[str, dict] = {}
    if not raw:
        return {}

    nested = raw.get("days")
    if isinstance(nested, Mapping):
        for dk, day in nested.items():
            entry = acc.setdefault(str(dk), {})
            if isinstance(day, Mapping):
                for name, value in day.items():
                    _route(entry, name, value)

    for key, value in raw.items():
        if not isinstance(key, str) or not key.startswith("days."):
            continue
        parts = key.split(".")
        # days.<date>.<field>; deeper paths such as inLoc.lat are ignored
        if len(parts) != 3 or not parts[1]:
            continue
        _route(acc.setdefault(parts[1], {}), parts[2], value)

    out: dict[str, DayEntry] = {}
    for dk, entry in acc.items():
        entry["has_in"] = bool(entry.get("has_in")) or entry.get("in_at") is not None
        entry["has_out"] = bool(entry.get("has_out")) or entry.get("out_at") is not None
        out[dk] = DayEntry(**entry)
    return out


def read_day(raw: Optional[Mapping[str, Any]], date_key: str) -> DayStatus:
    return DayStatus.from_entry(date_key, normalize_days(raw).get(date_key))


def _summary(raw: Mapping[str, Any]) -> AttendanceSummary:
    nested = raw.get("summary") if isinstance(raw.get("summary"), Mapping) else {}

    def pick(name: str) -> Any:
        value = nested.get(name)
        return value if value is not None else raw.get(f"summary.{name}")

    try:
        last_action = PunchType.parse(pick("lastAction")) if pick("lastAction") else None
    except ValueError:
        last_action = None

    return AttendanceSummary(
        last_action=last_action,
        last_action_at=as_timestamp(pick("lastActionAt")),
        total_days=_as_int(pick("totalDays")) or 0,
    )


def _logs(raw: Mapping[str, Any]) -> list[PunchLog]:
    logs: list[PunchLog] = []
    for item in raw.get("logs") or []:
        if not isinstance(item, Mapping):
            continue
        try:
            punch_type = PunchType.parse(item.get("type"))
        except ValueError:
            continue
        logs.append(
            PunchLog(
                date_key=str(item.get("dateKey") or ""),
                type=punch_type,
                at=as_timestamp(item.get("at")),
                loc=GeoSnapshot.from_dict(item.get("loc")),
            )
        )
    return logs


def parse_attendance(number: str, raw: Optional[Mapping[str, Any]], *, version: int = 0) -> StudentAttendance:
    raw = raw or {}
    return StudentAttendance(
        number=number,
        days=normalize_days(raw),
        logs=_logs(raw),
        summary=_summary(raw),
        version=version,
    )
