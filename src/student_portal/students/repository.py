from __future__ import annotations

from typing import Optional, Protocol

from .model import StudentProfile


class StudentRepository(Protocol):
    """Repository interface for student profiles.

    The service layer depends on this interface, not on a concrete store.
    """

    def get_by_number(self, number: str) -> Optional[StudentProfile]:
        raise NotImplementedError
