from __future__ import annotations

from datetime import datetime, timezone

from student_portal.attendance.normalizer import as_timestamp, normalize_days, parse_attendance, read_day
from student_portal.core.enums import PunchType

DK = "2025-10-28"


def test_nested_and_flattened_encodings_read_the_same():
    nested = {"days": {DK: {"hasIn": True, "hasOut": True, "inAtMs": 1000, "outAtMs": 61000, "durationMin": 1}}}
    flat = {
        f"days.{DK}.hasIn": True,
        f"days.{DK}.hasOut": True,
        f"days.{DK}.inAtMs": 1000,
        f"days.{DK}.outAtMs": 61000,
        f"days.{DK}.durationMin": 1,
    }

    assert normalize_days(nested) == normalize_days(flat)
    day = read_day(flat, DK)
    assert day.has_in and day.has_out
    assert day.duration_min == 1


def test_nested_value_wins_over_flattened_one():
    raw = {
        "days": {DK: {"durationMin": 30}},
        f"days.{DK}.durationMin": 45,
        f"days.{DK}.inPhoto": "/uploads/x.jpg",
    }

    entry = normalize_days(raw)[DK]

    assert entry.duration_min == 30
    assert entry.in_photo == "/uploads/x.jpg"


def test_flag_follows_timestamp_presence():
    raw = {"days": {DK: {"hasIn": False, "outAt": "2025-10-28T10:00:00+00:00"}}}

    entry = normalize_days(raw)[DK]

    assert entry.has_in is False
    assert entry.has_out is True
    assert entry.out_at == datetime(2025, 10, 28, 10, 0, tzinfo=timezone.utc)


def test_flat_flag_upgrades_nested_false():
    raw = {"days": {DK: {"hasIn": False}}, f"days.{DK}.hasIn": True}
    assert normalize_days(raw)[DK].has_in is True


def test_deeper_flattened_paths_are_ignored():
    raw = {f"days.{DK}.inLoc.lat": 19.4, f"days.{DK}.hasIn": True}

    entry = normalize_days(raw)[DK]

    assert entry.has_in is True
    assert entry.in_loc is None


def test_locations_are_routed_from_both_encodings():
    raw = {
        "days": {DK: {"inLoc": {"lat": 19.4, "lng": 72.8, "acc": 12, "distM": 3}}},
        f"days.{DK}.outLoc": {"lat": 19.5, "lng": 72.9},
    }

    entry = normalize_days(raw)[DK]

    assert entry.in_loc.dist_m == 3
    assert entry.out_loc.lat == 19.5


def test_missing_day_reads_as_empty_status():
    day = read_day({}, DK)
    assert (day.date_key, day.has_in, day.has_out, day.duration_min) == (DK, False, False, None)


def test_timestamp_shapes():
    expected = datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
    assert as_timestamp(1000) == expected
    assert as_timestamp({"seconds": 1, "nanoseconds": 0}) == expected
    assert as_timestamp(datetime(1970, 1, 1, 0, 0, 1)) == expected
    assert as_timestamp("not a date") is None
    assert as_timestamp(True) is None


def test_out_of_range_timestamps_read_as_missing():
    assert as_timestamp(1e20) is None
    assert as_timestamp(-1e20) is None
    assert as_timestamp({"seconds": 10**17}) is None

    day = read_day({"days": {DK: {"inAt": 1e20, "outAt": 5000}}}, DK)
    assert day.in_at is None
    assert day.has_in is False
    assert day.out_at == datetime(1970, 1, 1, 0, 0, 5, tzinfo=timezone.utc)
    assert day.has_out is True

    record = parse_attendance("9876543210", {"summary.lastActionAt": 1e20, "summary.totalDays": 2}, version=1)
    assert record.summary.last_action_at is None
    assert record.summary.total_days == 2


def test_summary_and_logs_from_either_shape():
    raw = {
        "summary.totalDays": 4,
        "summary": {"lastAction": "OUT"},
        "logs": [{"dateKey": DK, "type": "in", "at": 1000}, {"type": "bogus"}, "junk"],
    }

    record = parse_attendance("9876543210", raw, version=3)

    assert record.summary.total_days == 4
    assert record.summary.last_action == PunchType.OUT
    assert [l.type for l in record.logs] == [PunchType.IN]
    assert record.version == 3
