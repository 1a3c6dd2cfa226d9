from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


@dataclass(frozen=True)
class Document:
    """A stored JSON document plus its optimistic-concurrency version.

    ``version`` is 0 for a document that does not exist yet.
    """

    collection: str
    doc_id: str
    data: dict = field(default_factory=dict)
    version: int = 0

    @property
    def exists(self) -> bool:
        return self.version > 0


FilterOp = Literal["==", "in", ">=", "<="]


@dataclass(frozen=True)
class Filter:
    field: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False
