from __future__ import annotations

from datetime import timedelta

import pytest

from student_portal.attendance.capabilities import SubmittedLocation, SubmittedPhoto
from student_portal.common.datetime_utils import from_millis, to_millis
from student_portal.core.enums import DayState, PunchType
from student_portal.core.exceptions import (
    AlreadyPunchedIn,
    AlreadyPunchedOut,
    CaptureCancelled,
    LocationDenied,
    NotPunchedInYet,
    OutOfGeofence,
    ProfileNotFound,
    UploadFailed,
    WriteConflict,
)
from student_portal.students.cache import ProfileCache

from fakes import BHAYANDAR, EMAIL, NOW, NUMBER, TODAY, FakeCamera, FixedLocation, north_of

ATT = "studentattendance"


def _at_campus():
    return FixedLocation(*BHAYANDAR)


def _attendance(docs):
    return docs.get(ATT, NUMBER)


def test_punch_in_records_the_day(attendance_service, docs, photos, jpeg):
    result = attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))

    path = f"attendance/{NUMBER}/{TODAY}_{to_millis(NOW)}.jpg"
    assert result.photo_url == f"/uploads/{path}"
    assert photos.objects[path] == jpeg
    assert result.loc.dist_m == 0

    doc = _attendance(docs)
    day = doc.data["days"][TODAY]
    assert day["hasIn"] is True
    assert day["hasOut"] is False
    assert day["inAt"] == NOW
    assert day["inAtMs"] == to_millis(NOW)
    assert day["inPhoto"] == result.photo_url
    assert day["inLoc"]["distM"] == 0
    assert doc.data["summary"]["totalDays"] == 1
    assert doc.data["summary"]["lastAction"] == "IN"
    assert doc.data["meta"] == {"branch": "Bhayandar", "course": "BSc IT"}
    assert doc.data["name"] == "Demo Student"
    assert [l["type"] for l in doc.data["logs"]] == ["IN"]


def test_duration_is_rounded_minutes_between_in_and_out(attendance_service, docs, jpeg):
    docs.replace(ATT, NUMBER, {"days": {"1970-01-01": {"hasIn": True, "inAtMs": 1000}}})

    result = attendance_service.punch(
        EMAIL, PunchType.OUT, _at_campus(), FakeCamera(jpeg), now=from_millis(61000)
    )

    assert result.duration_min == 1
    day = _attendance(docs).data["days"]["1970-01-01"]
    assert day["hasOut"] is True
    assert day["durationMin"] == 1
    assert day["outAtMs"] == 61000


def test_in_then_out_same_day(attendance_service, docs, jpeg):
    attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))
    result = attendance_service.punch(
        EMAIL, PunchType.OUT, _at_campus(), FakeCamera(jpeg), now=NOW + timedelta(seconds=90)
    )

    # 1.5 minutes rounds half up
    assert result.duration_min == 2
    status = attendance_service.today_status(NUMBER, now=NOW)
    assert (status.has_in, status.has_out, status.duration_min) == (True, True, 2)
    assert _attendance(docs).data["summary"]["lastAction"] == "OUT"
    assert [l["type"] for l in _attendance(docs).data["logs"]] == ["IN", "OUT"]


def test_second_in_is_rejected_before_camera_opens(attendance_service, photos, jpeg):
    attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))
    camera = FakeCamera(jpeg)

    with pytest.raises(AlreadyPunchedIn):
        attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), camera)

    assert camera.captured == 0
    assert len(photos.objects) == 1


def test_out_without_in_is_rejected(attendance_service, docs, jpeg):
    with pytest.raises(NotPunchedInYet):
        attendance_service.punch(EMAIL, PunchType.OUT, _at_campus(), FakeCamera(jpeg))
    assert not _attendance(docs).exists


def test_second_out_is_rejected(attendance_service, docs, jpeg):
    docs.replace(ATT, NUMBER, {"days": {TODAY: {"hasIn": True, "hasOut": True}}})

    with pytest.raises(AlreadyPunchedOut):
        attendance_service.punch(EMAIL, PunchType.OUT, _at_campus(), FakeCamera(jpeg))


def test_legacy_flattened_in_blocks_another_in(attendance_service, docs, jpeg):
    docs.replace(ATT, NUMBER, {f"days.{TODAY}.hasIn": True})

    with pytest.raises(AlreadyPunchedIn):
        attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))


def test_total_days_moves_once_per_day(attendance_service, docs, jpeg):
    docs.replace(ATT, NUMBER, {"summary": {"totalDays": 5}})

    attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))
    attendance_service.punch(EMAIL, PunchType.OUT, _at_campus(), FakeCamera(jpeg), now=NOW + timedelta(hours=1))

    assert _attendance(docs).data["summary"]["totalDays"] == 6


def test_outside_geofence_is_rejected_with_distance(attendance_service, docs, jpeg):
    camera = FakeCamera(jpeg)

    with pytest.raises(OutOfGeofence) as exc:
        attendance_service.punch(EMAIL, PunchType.IN, FixedLocation(*north_of(BHAYANDAR, 60)), camera)

    assert exc.value.dist_m == 60
    assert exc.value.radius_m == 50
    assert "60m away" in exc.value.message
    assert exc.value.to_dict()["distM"] == 60
    assert camera.captured == 0
    assert not _attendance(docs).exists


def test_inside_geofence_keeps_rounded_distance(attendance_service, jpeg):
    result = attendance_service.punch(EMAIL, PunchType.IN, FixedLocation(*north_of(BHAYANDAR, 40)), FakeCamera(jpeg))
    assert result.loc.dist_m == 40


def test_location_denied_stops_the_flow(attendance_service, docs, jpeg):
    with pytest.raises(LocationDenied):
        attendance_service.punch(EMAIL, PunchType.IN, SubmittedLocation(error_code=1), FakeCamera(jpeg))
    assert not _attendance(docs).exists


def test_cancelled_capture_writes_nothing(attendance_service, docs, photos):
    with pytest.raises(CaptureCancelled):
        attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), SubmittedPhoto())
    assert photos.objects == {}
    assert not _attendance(docs).exists


def test_failed_upload_writes_nothing(attendance_service, docs, photos, jpeg):
    photos.fail = True

    with pytest.raises(UploadFailed):
        attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))
    assert not _attendance(docs).exists


def test_unknown_student_has_no_profile(attendance_service, jpeg):
    with pytest.raises(ProfileNotFound):
        attendance_service.punch("1111111111@abs-login.local", PunchType.IN, _at_campus(), FakeCamera(jpeg))


def test_punch_from_another_device_during_capture_is_a_conflict(attendance_service, docs, jpeg):
    def other_device_punches_in():
        docs.merge(ATT, NUMBER, {f"days.{TODAY}.hasIn": True})

    with pytest.raises(WriteConflict) as exc:
        attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg, on_capture=other_device_punches_in))

    assert isinstance(exc.value.cause, AlreadyPunchedIn)
    assert exc.value.message == AlreadyPunchedIn().message
    assert exc.value.to_dict()["cause"] == "ALREADY_PUNCHED_IN"


def test_lost_race_at_write_time_is_reported_with_cause(attendance_service, docs, jpeg):
    docs.before_merge = lambda: docs.merge(ATT, NUMBER, {f"days.{TODAY}.hasIn": True})

    with pytest.raises(WriteConflict) as exc:
        attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))

    assert isinstance(exc.value.cause, AlreadyPunchedIn)
    assert "inPhoto" not in _attendance(docs).data["days"][TODAY]


def test_unrelated_concurrent_write_is_a_plain_conflict(attendance_service, docs, jpeg):
    docs.before_merge = lambda: docs.merge(ATT, NUMBER, {"name": "Renamed"})

    with pytest.raises(WriteConflict) as exc:
        attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))

    assert exc.value.cause is None
    assert exc.value.code == "WRITE_CONFLICT"


def test_prepare_punch_checks_everything_before_the_camera(attendance_service):
    location = _at_campus()
    cache = ProfileCache({})

    plan = attendance_service.prepare_punch(EMAIL, PunchType.IN, location, cache=cache)

    assert plan.campus.name == "ABS Bhayandar"
    assert plan.status.date_key == TODAY
    assert location.calls == [{"high_accuracy": True, "timeout_s": 10.0}]
    assert plan.to_dict()["loc"] == {"lat": BHAYANDAR[0], "lng": BHAYANDAR[1], "acc": 12.0, "distM": 0}
    assert cache.get(NUMBER).branch == "Bhayandar"


def test_history_is_grouped_by_month_newest_first(attendance_service, docs):
    in_ms = to_millis(NOW)
    docs.replace(
        ATT,
        NUMBER,
        {
            "days": {
                "2025-09-30": {"hasIn": True, "inAtMs": in_ms},
                "2025-10-01": {"hasIn": True, "hasOut": True, "inAtMs": in_ms, "outAtMs": in_ms + 3_600_000, "durationMin": 60},
                "not-a-date": {"hasIn": True},
            },
            f"days.{TODAY}.hasIn": True,
            f"days.{TODAY}.inAtMs": in_ms,
        },
    )

    sections = attendance_service.history(NUMBER)

    assert [s.title for s in sections] == ["October 2025", "September 2025"]
    october = sections[0].rows
    assert [r.date_key for r in october] == [TODAY, "2025-10-01"]
    assert october[0].status == DayState.IN_ONLY
    assert october[0].in_text == "10:00"
    assert october[0].out_text == DayState.NONE.value
    assert october[1].status == DayState.DONE
    assert october[1].out_text == "11:00"
    assert october[1].duration_min == 60
    assert sections[1].rows[0].status == DayState.IN_ONLY


def test_history_survives_out_of_range_millis(attendance_service, docs):
    docs.replace(
        ATT,
        NUMBER,
        {
            "days": {
                TODAY: {"hasIn": True, "inAtMs": 10**18, "inAt": NOW, "hasOut": True, "outAtMs": 10**18},
                "2025-10-27": {"inAt": 1e20},
            },
        },
    )

    rows = attendance_service.history(NUMBER)[0].rows

    assert rows[0].date_key == TODAY
    assert rows[0].in_text == "10:00"
    assert rows[0].out_text == DayState.NONE.value
    assert rows[1].date_key == "2025-10-27"
    assert rows[1].status == DayState.NONE
    assert rows[1].in_text == DayState.NONE.value


def test_corrupt_timestamp_on_another_day_does_not_block_punching(attendance_service, docs, jpeg):
    docs.replace(ATT, NUMBER, {"days": {"2025-10-27": {"hasIn": True, "inAt": 1e20}}, "summary": {"lastActionAt": 1e20}})

    result = attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))

    assert result.punch_type == PunchType.IN
    assert attendance_service.today_status(NUMBER, now=NOW).has_in is True


def test_repeated_in_attempts_count_the_day_once(attendance_service, docs, jpeg):
    docs.replace(ATT, NUMBER, {"summary": {"totalDays": 5}})
    attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))

    for minutes in (1, 2, 3):
        with pytest.raises(AlreadyPunchedIn):
            attendance_service.punch(
                EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg), now=NOW + timedelta(minutes=minutes)
            )

    doc = _attendance(docs)
    assert doc.data["summary"]["totalDays"] == 6
    assert [l["type"] for l in doc.data["logs"]] == ["IN"]


def test_in_after_a_completed_day_is_rejected(attendance_service, docs, jpeg):
    attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), FakeCamera(jpeg))
    attendance_service.punch(EMAIL, PunchType.OUT, _at_campus(), FakeCamera(jpeg), now=NOW + timedelta(hours=1))
    camera = FakeCamera(jpeg)

    with pytest.raises(AlreadyPunchedIn):
        attendance_service.punch(EMAIL, PunchType.IN, _at_campus(), camera, now=NOW + timedelta(hours=2))

    assert camera.captured == 0
    doc = _attendance(docs)
    assert doc.data["summary"]["totalDays"] == 1
    assert [l["type"] for l in doc.data["logs"]] == ["IN", "OUT"]
