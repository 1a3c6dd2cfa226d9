from __future__ import annotations

from typing import MutableMapping, Optional

from ..core.constants import PROFILE_CACHE_PREFIX
from .model import StudentProfile


class ProfileCache:
    """Session-scoped profile cache.

    Wraps any mutable mapping; controllers pass the Flask session so entries
    live exactly as long as the login and disappear on ``session.clear()``.
    Entries have no expiry of their own.
    """

    def __init__(self, storage: Optional[MutableMapping] = None):
        self._storage = storage if storage is not None else {}

    @staticmethod
    def key_for(digits: str) -> str:
        return f"{PROFILE_CACHE_PREFIX}{digits}"

    def get(self, digits: str) -> Optional[StudentProfile]:
        raw = self._storage.get(self.key_for(digits))
        if not raw:
            return None
        return StudentProfile.from_dict(raw)

    def put(self, digits: str, profile: StudentProfile) -> None:
        self._storage[self.key_for(digits)] = profile.to_dict()

    def clear(self) -> None:
        for key in [k for k in self._storage if str(k).startswith(PROFILE_CACHE_PREFIX)]:
            del self._storage[key]
