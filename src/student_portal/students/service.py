from __future__ import annotations

import logging
from typing import Optional

from ..common.identity import email_to_number
from .cache import ProfileCache
from .model import StudentProfile
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class ProfileService:
    """Use case: resolve the logged-in identity to a student record."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def load_by_email(self, email: Optional[str], cache: Optional[ProfileCache] = None) -> Optional[StudentProfile]:
        digits = email_to_number(email)
        if not digits:
            return None

        if cache is not None:
            cached = cache.get(digits)
            if cached:
                return cached

        profile = self._students.get_by_number(digits)
        if not profile:
            logger.info("No student record for number %s", digits)
            return None

        if cache is not None:
            cache.put(digits, profile)
        return profile
