from __future__ import annotations

from typing import Optional, Protocol

from ..core.constants import RESULTS_COLLECTION
from ..documents.repository import DocumentRepository
from .model import ResultSheet


class ResultRepository(Protocol):
    def get_for_number(self, number: str) -> Optional[ResultSheet]:
        raise NotImplementedError


class DocumentResultRepository(ResultRepository):
    """``results`` documents are keyed by the student's number."""

    def __init__(self, documents: DocumentRepository):
        self._documents = documents

    def get_for_number(self, number: str) -> Optional[ResultSheet]:
        doc = self._documents.get(RESULTS_COLLECTION, number)
        if not doc.exists:
            return None
        return ResultSheet.from_document(doc.data)
