from __future__ import annotations

from datetime import datetime, timezone

import pytest

from student_portal.core.exceptions import StaleDocumentError
from student_portal.documents.codec import decode_body, encode_body
from student_portal.documents.merge import SERVER_TIMESTAMP, ArrayUnion, apply_merge, split_path

from fakes import InMemoryDocumentRepository

T = datetime(2025, 10, 28, 4, 30, tzinfo=timezone.utc)


def test_dotted_paths_create_nested_objects_and_keep_siblings():
    body = {"days": {"2025-10-27": {"hasIn": True}}, "name": "A"}

    out = apply_merge(body, {"days.2025-10-28.hasIn": True, "days.2025-10-28.inAtMs": 1000}, server_time=T)

    assert out["days"]["2025-10-27"] == {"hasIn": True}
    assert out["days"]["2025-10-28"] == {"hasIn": True, "inAtMs": 1000}
    assert out["name"] == "A"
    # input untouched
    assert "2025-10-28" not in body["days"]


def test_server_timestamp_resolves_to_write_time():
    out = apply_merge({}, {"summary.lastActionAt": SERVER_TIMESTAMP}, server_time=T)
    assert out["summary"]["lastActionAt"] == T


def test_array_union_appends_only_missing_items():
    body = {"logs": [{"type": "IN"}]}
    out = apply_merge(body, {"logs": ArrayUnion({"type": "IN"}, {"type": "OUT"})}, server_time=T)
    assert out["logs"] == [{"type": "IN"}, {"type": "OUT"}]


def test_mapping_values_are_deep_merged():
    body = {"meta": {"branch": "Bhayandar", "course": "BSc IT"}}
    out = apply_merge(body, {"meta": {"course": "BCom"}}, server_time=T)
    assert out["meta"] == {"branch": "Bhayandar", "course": "BCom"}


def test_empty_path_segment_is_rejected():
    with pytest.raises(ValueError):
        split_path("days..hasIn")


def test_codec_keeps_datetimes():
    raw = encode_body({"at": T, "n": 1})
    assert decode_body(raw) == {"at": T, "n": 1}
    assert decode_body(raw.encode("utf-8"))["at"] == T
    assert decode_body(None) == {}


def test_compare_and_swap_on_version():
    docs = InMemoryDocumentRepository()

    first = docs.merge("c", "1", {"a": 1}, expected_version=0)
    assert first.version == 1

    with pytest.raises(StaleDocumentError):
        docs.merge("c", "1", {"a": 2}, expected_version=0)

    second = docs.merge("c", "1", {"b": 2}, expected_version=1)
    assert second.version == 2
    assert second.data == {"a": 1, "b": 2}
