from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import date_key, local_date, now_utc
from ..core.constants import DEFAULT_BRANCH_WINDOW_DAYS, DEFAULT_REFERENCE_TIMEZONE
from ..students.model import StudentProfile
from .model import Lecture
from .repository import LectureRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TodayTomorrow:
    today: list[Lecture]
    tomorrow: list[Lecture]

    def to_dict(self) -> dict:
        return {
            "today": [l.to_dict() for l in self.today],
            "tomorrow": [l.to_dict() for l in self.tomorrow],
        }


class LectureService:
    def __init__(
        self,
        lectures: LectureRepository,
        *,
        tz_name: str = DEFAULT_REFERENCE_TIMEZONE,
        window_days: int = DEFAULT_BRANCH_WINDOW_DAYS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._lectures = lectures
        self._tz_name = tz_name
        self._window_days = int(window_days)
        self._clock = clock

    def today_tomorrow(self, profile: StudentProfile, *, now: Optional[datetime] = None) -> TodayTomorrow:
        if not profile.has_schedule_keys:
            logger.warning("Missing student details to fetch lectures for %s", profile.number)
            return TodayTomorrow(today=[], tomorrow=[])

        today = local_date(now or self._clock(), tz_name=self._tz_name)
        today_s = date_key(today)
        tomorrow_s = date_key(today + timedelta(days=1))

        rows = self._lectures.find_for_cohort(
            branch=profile.branch or "",
            course=profile.course or "",
            batch=profile.batch or "",
            year=profile.year or "",
            dates=[today_s, tomorrow_s],
        )
        return TodayTomorrow(
            today=[r for r in rows if r.date == today_s],
            tomorrow=[r for r in rows if r.date == tomorrow_s],
        )

    def branch_month(self, branch: Optional[str], *, now: Optional[datetime] = None) -> list[Lecture]:
        branch = (branch or "").strip()
        if not branch:
            return []

        start = local_date(now or self._clock(), tz_name=self._tz_name)
        end = start + timedelta(days=self._window_days)
        return list(self._lectures.find_for_branch(branch=branch, start=date_key(start), end=date_key(end)))
