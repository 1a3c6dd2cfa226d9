from __future__ import annotations

from typing import Protocol


class PhotoStorage(Protocol):
    """Durable object storage for punch selfies."""

    def put(self, path: str, data: bytes, *, content_type: str = "image/jpeg") -> str:
        """Store *data* at *path* and return a stable public URL."""

        raise NotImplementedError
