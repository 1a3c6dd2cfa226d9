from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..common.geo import LatLng, haversine_meters
from ..common.numbers import round_half_up
from ..core.exceptions import LocationUnavailable, OutOfGeofence
from .capabilities import GeoFix
from .model import GeoSnapshot


@dataclass(frozen=True)
class Campus:
    name: str
    center: LatLng


def _campus(key: str, value: Mapping[str, Any]) -> Campus:
    center = value["center"]
    return Campus(
        name=str(value.get("name") or key),
        center=LatLng(lat=float(center["lat"]), lng=float(center["lng"])),
    )


@dataclass(frozen=True)
class GeofenceConfig:
    """Deployment geofence: branch centers, a default center and one radius."""

    radius_m: float
    default_campus: Campus
    branches: Mapping[str, Campus] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls,
        *,
        radius_m: float,
        default_center: Mapping[str, Any],
        branch_locations: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> "GeofenceConfig":
        radius_m = float(radius_m)
        if radius_m <= 0:
            raise ValueError("GEOFENCE_RADIUS_M must be positive")
        return cls(
            radius_m=radius_m,
            default_campus=_campus("default", default_center),
            branches={k: _campus(k, v) for k, v in (branch_locations or {}).items()},
        )

    def campus_for(self, branch: Optional[str]) -> Campus:
        """Branch keys must match the student's ``branch`` field exactly."""
        return self.branches.get(branch or "", self.default_campus)

    def check(self, branch: Optional[str], fix: GeoFix) -> GeoSnapshot:
        campus = self.campus_for(branch)
        try:
            dist = haversine_meters(LatLng(fix.lat, fix.lng), campus.center)
        except ValueError as e:
            raise LocationUnavailable() from e

        if dist > self.radius_m:
            raise OutOfGeofence(round_half_up(dist), self.radius_m, campus.name)

        return GeoSnapshot(lat=fix.lat, lng=fix.lng, acc=fix.accuracy, dist_m=round_half_up(dist))
