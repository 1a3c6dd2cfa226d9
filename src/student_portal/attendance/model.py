from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.validators import is_finite_number
from ..core.enums import PunchType


@dataclass(frozen=True)
class GeoSnapshot:
    """Location attached to a punch; never mutated after creation."""

    lat: float
    lng: float
    acc: Optional[float] = None
    dist_m: Optional[int] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"lat": self.lat, "lng": self.lng}
        if self.acc is not None:
            data["acc"] = self.acc
        if self.dist_m is not None:
            data["distM"] = self.dist_m
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Optional["GeoSnapshot"]:
        if not isinstance(data, Mapping):
            return None
        lat, lng = data.get("lat"), data.get("lng")
        if not (is_finite_number(lat) and is_finite_number(lng)):
            return None
        acc = data.get("acc")
        dist = data.get("distM")
        return cls(
            lat=float(lat),
            lng=float(lng),
            acc=float(acc) if is_finite_number(acc) else None,
            dist_m=int(dist) if is_finite_number(dist) else None,
        )


@dataclass(frozen=True)
class DayEntry:
    """Canonical per-day attendance, whatever shape it was stored in."""

    has_in: bool = False
    has_out: bool = False
    in_at: Optional[datetime] = None
    out_at: Optional[datetime] = None
    in_at_ms: Optional[int] = None
    out_at_ms: Optional[int] = None
    duration_min: Optional[int] = None
    in_photo: Optional[str] = None
    out_photo: Optional[str] = None
    in_loc: Optional[GeoSnapshot] = None
    out_loc: Optional[GeoSnapshot] = None


@dataclass(frozen=True)
class DayStatus:
    date_key: str
    has_in: bool = False
    has_out: bool = False
    duration_min: Optional[int] = None
    in_at: Optional[datetime] = None
    out_at: Optional[datetime] = None
    in_at_ms: Optional[int] = None

    @classmethod
    def from_entry(cls, date_key: str, entry: Optional[DayEntry]) -> "DayStatus":
        if entry is None:
            return cls(date_key=date_key)
        return cls(
            date_key=date_key,
            has_in=entry.has_in,
            has_out=entry.has_out,
            duration_min=entry.duration_min,
            in_at=entry.in_at,
            out_at=entry.out_at,
            in_at_ms=entry.in_at_ms,
        )

    def to_dict(self) -> dict:
        return {
            "dateKey": self.date_key,
            "hasIn": self.has_in,
            "hasOut": self.has_out,
            "durationMin": self.duration_min,
            "inAt": self.in_at.isoformat() if self.in_at else None,
            "outAt": self.out_at.isoformat() if self.out_at else None,
        }


@dataclass(frozen=True)
class PunchLog:
    date_key: str
    type: PunchType
    at: Optional[datetime] = None
    loc: Optional[GeoSnapshot] = None


@dataclass(frozen=True)
class AttendanceSummary:
    last_action: Optional[PunchType] = None
    last_action_at: Optional[datetime] = None
    total_days: int = 0


@dataclass(frozen=True)
class StudentAttendance:
    """Read model of one ``studentattendance`` document."""

    number: str
    days: dict[str, DayEntry] = field(default_factory=dict)
    logs: list[PunchLog] = field(default_factory=list)
    summary: AttendanceSummary = field(default_factory=AttendanceSummary)
    version: int = 0

    def day(self, date_key: str) -> DayStatus:
        return DayStatus.from_entry(date_key, self.days.get(date_key))


@dataclass(frozen=True)
class PunchResult:
    punch_type: PunchType
    date_key: str
    photo_url: str
    loc: Optional[GeoSnapshot] = None
    duration_min: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "type": self.punch_type.value,
            "dateKey": self.date_key,
            "photoUrl": self.photo_url,
            "loc": self.loc.to_dict() if self.loc else None,
            "durationMin": self.duration_min,
        }
