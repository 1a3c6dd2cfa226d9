from __future__ import annotations

from typing import Protocol, Sequence

from ..core.constants import ANNOUNCEMENTS_COLLECTION, BANNERS_COLLECTION
from ..documents.model import Filter, OrderBy
from ..documents.repository import DocumentRepository
from .model import Announcement, Banner


class ContentRepository(Protocol):
    def active_banners(self) -> Sequence[Banner]:
        raise NotImplementedError

    def recent_announcements(self, *, limit: int) -> Sequence[Announcement]:
        raise NotImplementedError


class DocumentContentRepository(ContentRepository):
    def __init__(self, documents: DocumentRepository):
        self._documents = documents

    def active_banners(self) -> Sequence[Banner]:
        # Older banners store the flag as the string "TRUE".
        docs = self._documents.query(BANNERS_COLLECTION, filters=[Filter("isActive", "in", ["TRUE", True])])
        return [Banner.from_document(d.doc_id, d.data) for d in docs]

    def recent_announcements(self, *, limit: int) -> Sequence[Announcement]:
        docs = self._documents.query(
            ANNOUNCEMENTS_COLLECTION,
            order_by=[OrderBy("date", descending=True)],
            limit=limit,
        )
        return [Announcement.from_document(d.doc_id, d.data) for d in docs]
