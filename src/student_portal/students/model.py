from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class StudentProfile:
    """Domain entity: a student record from the ``students`` collection."""

    number: str
    name: Optional[str] = None
    branch: Optional[str] = None
    course: Optional[str] = None
    batch: Optional[str] = None
    year: Optional[str] = None

    @property
    def has_schedule_keys(self) -> bool:
        return bool(self.branch and self.course and self.batch and self.year)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StudentProfile":
        def _s(key: str) -> Optional[str]:
            value = data.get(key)
            return None if value is None else str(value).strip()

        return cls(
            number=str(data.get("number") or "").strip(),
            name=_s("name"),
            branch=_s("branch"),
            course=_s("course"),
            batch=_s("batch"),
            year=_s("year"),
        )
