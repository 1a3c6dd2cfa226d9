from __future__ import annotations

import logging
from datetime import datetime

from ..common.datetime_utils import to_millis
from ..core.exceptions import UploadFailed
from .repository import PhotoStorage

logger = logging.getLogger(__name__)


class PhotoUploadService:
    """Use case: store a punch selfie and return its URL."""

    def __init__(self, storage: PhotoStorage):
        self._storage = storage

    @staticmethod
    def path_for(number: str, date_key: str, now: datetime) -> str:
        return f"attendance/{number}/{date_key}_{to_millis(now)}.jpg"

    def upload(self, image: bytes, *, number: str, date_key: str, now: datetime) -> str:
        path = self.path_for(number, date_key, now)
        try:
            return self._storage.put(path, image, content_type="image/jpeg")
        except (OSError, ValueError) as e:
            logger.warning("Photo upload failed for %s: %s", number, e)
            raise UploadFailed() from e
