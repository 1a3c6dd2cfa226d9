from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from student_portal.attendance.capabilities import GeoFix, SubmittedLocation, SubmittedPhoto
from student_portal.attendance.geofence import GeofenceConfig
from student_portal.core.exceptions import (
    CaptureCancelled,
    CaptureFailed,
    LocationDenied,
    LocationUnavailable,
)

from fakes import BHAYANDAR, make_jpeg


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", (4, 4), (0, 255, 0, 128)).save(buf, format="PNG")
    return buf.getvalue()


def test_location_from_payload():
    loc = SubmittedLocation.from_payload({"lat": "19.4", "lng": 72.8, "accuracy": "15"})
    fix = loc.current_position(high_accuracy=True, timeout_s=10)
    assert (fix.lat, fix.lng, fix.accuracy) == (19.4, 72.8, 15.0)


@pytest.mark.parametrize(
    "payload, error",
    [
        ({"errorCode": 1}, LocationDenied),
        ({"errorCode": "2"}, LocationUnavailable),
        ({"errorCode": 3}, LocationUnavailable),
        ({"lat": 19.4}, LocationUnavailable),
        ({"lat": "nan", "lng": 72.8}, LocationUnavailable),
    ],
)
def test_location_errors(payload, error):
    with pytest.raises(error):
        SubmittedLocation.from_payload(payload).current_position(high_accuracy=True, timeout_s=10)


def test_timeout_message_names_the_timeout():
    with pytest.raises(LocationUnavailable) as exc:
        SubmittedLocation(error_code=3).current_position(high_accuracy=True, timeout_s=10)
    assert "10 seconds" in exc.value.message


def test_photo_data_url_is_reencoded_as_jpeg():
    data_url = "data:image/png;base64," + base64.b64encode(_png_bytes()).decode("ascii")

    out = SubmittedPhoto(data_url=data_url).capture()

    assert Image.open(io.BytesIO(out)).format == "JPEG"


def test_photo_file_upload():
    out = SubmittedPhoto(file_bytes=make_jpeg()).capture()
    assert out[:2] == b"\xff\xd8"


def test_photo_empty_means_cancelled():
    with pytest.raises(CaptureCancelled):
        SubmittedPhoto(data_url="  ").capture()


@pytest.mark.parametrize("data_url", ["data:image/jpeg;base64,@@@", "data:image/jpeg;base64," + base64.b64encode(b"nope").decode()])
def test_photo_garbage_is_capture_failure(data_url):
    with pytest.raises(CaptureFailed):
        SubmittedPhoto(data_url=data_url).capture()


def test_oversized_photo_is_capture_failure(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 4)

    with pytest.raises(CaptureFailed):
        SubmittedPhoto(file_bytes=_png_bytes()).capture()


def test_geofence_falls_back_to_default_campus():
    config = GeofenceConfig.from_settings(
        radius_m=50,
        default_center={"name": "ABS Main", "center": {"lat": BHAYANDAR[0], "lng": BHAYANDAR[1]}},
    )
    assert config.campus_for("Unknown").name == "ABS Main"
    assert config.campus_for(None).name == "ABS Main"


def test_geofence_radius_must_be_positive():
    with pytest.raises(ValueError):
        GeofenceConfig.from_settings(radius_m=0, default_center={"center": {"lat": 0, "lng": 0}})


def test_geofence_invalid_fix_is_unavailable(geofence):
    with pytest.raises(LocationUnavailable):
        geofence.check("Bhayandar", GeoFix(lat=float("inf"), lng=72.8))
