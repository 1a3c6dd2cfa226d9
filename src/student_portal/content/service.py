from __future__ import annotations

import logging

from ..core.constants import DEFAULT_ANNOUNCEMENT_LIMIT
from .model import Announcement, Banner
from .repository import ContentRepository

logger = logging.getLogger(__name__)


class ContentService:
    """Use case: dashboard banners and the announcement board."""

    def __init__(self, content: ContentRepository, *, announcement_limit: int = DEFAULT_ANNOUNCEMENT_LIMIT):
        self._content = content
        self._announcement_limit = int(announcement_limit)

    def banners(self) -> list[Banner]:
        """Active banners sorted by ``order``; a store failure yields no banners."""
        try:
            rows = [b for b in self._content.active_banners() if b.is_active]
        except Exception:
            logger.exception("Loading banners failed")
            return []
        return sorted(rows, key=lambda b: b.order)

    def announcements(self) -> list[Announcement]:
        return list(self._content.recent_announcements(limit=self._announcement_limit))
