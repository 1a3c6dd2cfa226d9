from __future__ import annotations

from typing import Any, Mapping

from ..core.constants import ATTENDANCE_COLLECTION
from ..documents.repository import DocumentRepository
from .model import StudentAttendance
from .normalizer import parse_attendance
from .repository import AttendanceRepository


class DocumentAttendanceRepository(AttendanceRepository):
    def __init__(self, documents: DocumentRepository):
        self._documents = documents

    def get_from_server(self, number: str) -> StudentAttendance:
        doc = self._documents.get(ATTENDANCE_COLLECTION, str(number).strip())
        return parse_attendance(doc.doc_id, doc.data, version=doc.version)

    def apply_patch(self, number: str, patch: Mapping[str, Any], *, expected_version: int) -> int:
        doc = self._documents.merge(
            ATTENDANCE_COLLECTION,
            str(number).strip(),
            patch,
            expected_version=expected_version,
        )
        return doc.version
