from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, radians, sin, sqrt

from ..core.constants import EARTH_RADIUS_M
from .validators import is_finite_number


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float


def haversine_meters(p1: LatLng, p2: LatLng) -> float:
    """Great-circle distance between two points in meters.

    Raises ValueError on non-finite coordinates instead of returning NaN.
    """
    for value in (p1.lat, p1.lng, p2.lat, p2.lng):
        if not is_finite_number(value):
            raise ValueError(f"Invalid coordinate: {value!r}")

    phi1, phi2 = radians(p1.lat), radians(p2.lat)
    d_phi = radians(p2.lat - p1.lat)
    d_lambda = radians(p2.lng - p1.lng)

    a = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))
