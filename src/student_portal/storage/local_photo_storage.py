from __future__ import annotations

import logging
import os

from werkzeug.utils import safe_join

from .repository import PhotoStorage

logger = logging.getLogger(__name__)


class LocalPhotoStorage(PhotoStorage):
    """Writes objects under ``upload_folder``; Flask serves them at ``url_prefix``."""

    def __init__(self, upload_folder: str, url_prefix: str = "/uploads"):
        self._upload_folder = upload_folder
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def upload_folder(self) -> str:
        return self._upload_folder

    def put(self, path: str, data: bytes, *, content_type: str = "image/jpeg") -> str:
        filepath = safe_join(self._upload_folder, path)
        if filepath is None:
            raise ValueError(f"Unsafe storage path: {path!r}")

        os.makedirs(os.path.dirname(filepath), exist_ok=True)
        with open(filepath, "wb") as fh:
            fh.write(data)

        logger.debug("Stored %d bytes (%s) at %s", len(data), content_type, filepath)
        return f"{self._url_prefix}/{path.replace(os.sep, '/')}"
