from __future__ import annotations

from typing import Sequence

from ..core.constants import LECTURES_COLLECTION
from ..documents.model import Filter, OrderBy
from ..documents.repository import DocumentRepository
from .model import Lecture
from .repository import LectureRepository


class DocumentLectureRepository(LectureRepository):
    def __init__(self, documents: DocumentRepository):
        self._documents = documents

    def find_for_cohort(
        self,
        *,
        branch: str,
        course: str,
        batch: str,
        year: str,
        dates: Sequence[str],
    ) -> Sequence[Lecture]:
        docs = self._documents.query(
            LECTURES_COLLECTION,
            filters=[
                Filter("branch", "==", branch),
                Filter("course", "==", course),
                Filter("batch", "==", batch),
                Filter("year", "==", year),
                Filter("date", "in", list(dates)),
            ],
            order_by=[OrderBy("start")],
        )
        return [Lecture.from_document(d.doc_id, d.data) for d in docs]

    def find_for_branch(self, *, branch: str, start: str, end: str) -> Sequence[Lecture]:
        docs = self._documents.query(
            LECTURES_COLLECTION,
            filters=[
                Filter("branch", "==", branch),
                Filter("date", ">=", start),
                Filter("date", "<=", end),
            ],
            order_by=[OrderBy("date"), OrderBy("start")],
        )
        return [Lecture.from_document(d.doc_id, d.data) for d in docs]
