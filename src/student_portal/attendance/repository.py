from __future__ import annotations

from typing import Any, Mapping, Protocol

from .model import StudentAttendance


class AttendanceRepository(Protocol):
    def get_from_server(self, number: str) -> StudentAttendance:
        """Authoritative read; an absent document yields an empty record (version 0)."""

        raise NotImplementedError

    def apply_patch(self, number: str, patch: Mapping[str, Any], *, expected_version: int) -> int:
        """Merge *patch* if the stored version is still *expected_version*.

        Returns the new version. Raises StaleDocumentError otherwise.
        """

        raise NotImplementedError
