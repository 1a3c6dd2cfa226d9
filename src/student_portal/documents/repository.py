from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Document, Filter, OrderBy


class DocumentRepository(Protocol):
    """Keyed JSON document collections.

    Reads are authoritative (no client cache). Writes are merge patches (see
    ``documents.merge``); ``expected_version`` turns a merge into a
    compare-and-swap: 0 means "document must not exist yet", ``None`` means
    unconditional.
    """

    def get(self, collection: str, doc_id: str) -> Document:
        raise NotImplementedError

    def query(
        self,
        collection: str,
        *,
        filters: Sequence[Filter] = (),
        order_by: Sequence[OrderBy] = (),
        limit: Optional[int] = None,
    ) -> Sequence[Document]:
        raise NotImplementedError

    def merge(
        self,
        collection: str,
        doc_id: str,
        patch: Mapping[str, Any],
        *,
        expected_version: Optional[int] = None,
    ) -> Document:
        """Raises StaleDocumentError when ``expected_version`` does not match."""

        raise NotImplementedError

    def replace(self, collection: str, doc_id: str, data: dict) -> Document:
        """Full overwrite; used for seeding and admin imports only."""

        raise NotImplementedError
