from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class Lecture:
    """One scheduled session from the ``lectures`` collection."""

    id: str
    subject: str = ""
    faculty: str = ""
    start: str = ""
    end: str = ""
    mode: str = ""
    link: str = ""
    location: str = ""
    date: str = ""

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Lecture":
        def _s(key: str) -> str:
            value = data.get(key)
            return "" if value is None else str(value)

        return cls(
            id=doc_id,
            subject=_s("subject"),
            faculty=_s("faculty"),
            start=_s("start"),
            end=_s("end"),
            mode=_s("mode"),
            link=_s("link"),
            location=_s("location"),
            date=_s("date"),
        )

    def to_dict(self) -> dict:
        return asdict(self)
