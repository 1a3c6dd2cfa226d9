from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

Mark = Union[int, float, str, None]

_UPPER = re.compile(r"([A-Z])")


def format_subject_name(key: str) -> str:
    """``appliedMaths`` -> ``applied Maths``."""
    if not key:
        return ""
    return _UPPER.sub(r" \1", key).strip()


@dataclass(frozen=True)
class ResultSheet:
    marks: dict[str, Mark] = field(default_factory=dict)
    exam_type: Optional[str] = None
    total_marks: Optional[float] = None

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "ResultSheet":
        marks = data.get("marks")
        total = data.get("Marks")
        return cls(
            marks=dict(marks) if isinstance(marks, Mapping) else {},
            exam_type=data.get("ExamType"),
            total_marks=total if isinstance(total, (int, float)) and not isinstance(total, bool) else None,
        )

    def to_dict(self) -> dict:
        return {
            "examType": self.exam_type,
            "totalMarks": self.total_marks,
            "subjects": [
                {"key": k, "subject": format_subject_name(k), "marks": v}
                for k, v in self.marks.items()
            ],
        }
