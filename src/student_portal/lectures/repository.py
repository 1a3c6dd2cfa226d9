from __future__ import annotations

from typing import Protocol, Sequence

from .model import Lecture


class LectureRepository(Protocol):
    def find_for_cohort(
        self,
        *,
        branch: str,
        course: str,
        batch: str,
        year: str,
        dates: Sequence[str],
    ) -> Sequence[Lecture]:
        raise NotImplementedError

    def find_for_branch(self, *, branch: str, start: str, end: str) -> Sequence[Lecture]:
        """Lectures with ``start <= date <= end``, ordered by date then start time."""

        raise NotImplementedError
