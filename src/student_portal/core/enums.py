from __future__ import annotations

from enum import Enum


class PunchType(str, Enum):
    """Punch direction."""

    IN = "IN"
    OUT = "OUT"

    @classmethod
    def parse(cls, value: str) -> "PunchType":
        return cls(str(value or "").strip().upper())


class DayState(str, Enum):
    """Status label of one day in the attendance history."""

    DONE = "Done"
    IN_ONLY = "IN only"
    NONE = "—"


class LocationErrorCode(int, Enum):
    """Browser geolocation error codes (GeolocationPositionError.code)."""

    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3
