"""Device capabilities used by the punch flow.

Only the student's device can produce a geolocation fix or a selfie, so the
flow talks to them through two small interfaces. The HTTP layer builds the
``Submitted*`` implementations from what the browser posted.
"""

from __future__ import annotations

import base64
import binascii
import io
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from PIL import Image, UnidentifiedImageError

from ..common.validators import is_finite_number
from ..core.enums import LocationErrorCode
from ..core.exceptions import CaptureCancelled, CaptureFailed, LocationDenied, LocationUnavailable


@dataclass(frozen=True)
class GeoFix:
    lat: float
    lng: float
    accuracy: Optional[float] = None


class LocationProvider(Protocol):
    def current_position(self, *, high_accuracy: bool, timeout_s: float) -> GeoFix:
        """Single fix. Raises LocationDenied / LocationUnavailable."""

        raise NotImplementedError


class Camera(Protocol):
    def capture(self) -> bytes:
        """One still frame as JPEG bytes. Raises CaptureCancelled / CaptureFailed."""

        raise NotImplementedError


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if is_finite_number(number) else None


class SubmittedLocation(LocationProvider):
    """Fix (or error code) reported by ``navigator.geolocation``.

    The browser was asked for high accuracy with the configured timeout;
    code 3 means that timeout expired.
    """

    def __init__(
        self,
        *,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        accuracy: Optional[float] = None,
        error_code: Optional[int] = None,
    ):
        self._lat = lat
        self._lng = lng
        self._accuracy = accuracy
        self._error_code = error_code

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SubmittedLocation":
        code = payload.get("errorCode")
        try:
            error_code = int(code) if code not in (None, "") else None
        except (TypeError, ValueError):
            error_code = int(LocationErrorCode.POSITION_UNAVAILABLE)
        return cls(
            lat=_to_float(payload.get("lat")),
            lng=_to_float(payload.get("lng")),
            accuracy=_to_float(payload.get("accuracy")),
            error_code=error_code,
        )

    def current_position(self, *, high_accuracy: bool, timeout_s: float) -> GeoFix:
        if self._error_code == LocationErrorCode.PERMISSION_DENIED:
            raise LocationDenied()
        if self._error_code == LocationErrorCode.TIMEOUT:
            raise LocationUnavailable(f"Could not get your location within {timeout_s:g} seconds.")
        if self._error_code is not None or self._lat is None or self._lng is None:
            raise LocationUnavailable()
        return GeoFix(lat=self._lat, lng=self._lng, accuracy=self._accuracy)


_DATA_URL = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(;[\w=-]+)*;base64,(?P<data>.*)$", re.DOTALL)


def _reencode_jpeg(raw: bytes) -> bytes:
    try:
        img = Image.open(io.BytesIO(raw)).convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise CaptureFailed() from e

    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=85)
    return buf.getvalue()


class SubmittedPhoto(Camera):
    """Selfie captured in the browser, posted as a data URL or a file upload.

    An empty submission means the student cancelled the capture.
    """

    def __init__(self, *, data_url: Optional[str] = None, file_bytes: Optional[bytes] = None):
        self._data_url = (data_url or "").strip()
        self._file_bytes = file_bytes

    def capture(self) -> bytes:
        if self._file_bytes:
            return _reencode_jpeg(self._file_bytes)
        if not self._data_url:
            raise CaptureCancelled()

        m = _DATA_URL.match(self._data_url)
        payload = m.group("data") if m else self._data_url
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CaptureFailed() from e
        if not raw:
            raise CaptureCancelled()
        return _reencode_jpeg(raw)
