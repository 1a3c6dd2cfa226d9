from __future__ import annotations

from typing import Optional

from ..core.constants import STUDENTS_COLLECTION
from ..documents.model import Filter
from ..documents.repository import DocumentRepository
from .model import StudentProfile
from .repository import StudentRepository


class DocumentStudentRepository(StudentRepository):
    def __init__(self, documents: DocumentRepository):
        self._documents = documents

    def get_by_number(self, number: str) -> Optional[StudentProfile]:
        docs = self._documents.query(
            STUDENTS_COLLECTION,
            filters=[Filter("number", "==", number)],
            limit=1,
        )
        if not docs:
            return None
        return StudentProfile.from_dict(docs[0].data)
