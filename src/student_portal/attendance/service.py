from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from ..common.datetime_utils import format_clock, now_utc, parse_iso_date, to_millis, today_key, try_from_millis
from ..common.numbers import round_half_up
from ..core.constants import DEFAULT_GEOLOCATION_TIMEOUT_SECONDS, DEFAULT_REFERENCE_TIMEZONE
from ..core.enums import DayState, PunchType
from ..core.exceptions import (
    AlreadyPunchedIn,
    AlreadyPunchedOut,
    AttendanceError,
    NotPunchedInYet,
    ProfileNotFound,
    StaleDocumentError,
    WriteConflict,
)
from ..documents.merge import SERVER_TIMESTAMP, ArrayUnion
from ..storage.service import PhotoUploadService
from ..students.cache import ProfileCache
from ..students.model import StudentProfile
from ..students.service import ProfileService
from .capabilities import Camera, LocationProvider
from .geofence import Campus, GeofenceConfig
from .model import DayEntry, DayStatus, GeoSnapshot, PunchResult, StudentAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PunchPlan:
    """Outcome of the pre-checks: everything the write needs except the photo."""

    profile: StudentProfile
    punch_type: PunchType
    status: DayStatus
    campus: Campus
    loc: GeoSnapshot

    def to_dict(self) -> dict:
        return {
            "type": self.punch_type.value,
            "dateKey": self.status.date_key,
            "campus": self.campus.name,
            "loc": self.loc.to_dict(),
        }


@dataclass(frozen=True)
class HistoryRow:
    date_key: str
    in_text: str
    out_text: str
    duration_min: Optional[int]
    status: DayState


@dataclass(frozen=True)
class HistorySection:
    title: str
    rows: list[HistoryRow]


class AttendanceService:
    """Use case: punch IN/OUT with geofence + selfie, and read attendance.

    The punch is a strict sequence; every step is a hard stop:
    profile -> today's status -> guards -> location -> geofence -> photo
    -> upload -> compare-and-swap write.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        profiles: ProfileService,
        photos: PhotoUploadService,
        geofence: GeofenceConfig,
        *,
        tz_name: str = DEFAULT_REFERENCE_TIMEZONE,
        location_timeout_s: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._photos = photos
        self._geofence = geofence
        self._tz_name = tz_name
        self._location_timeout_s = float(location_timeout_s)
        self._clock = clock

    # --- reads ---

    def today_key(self, *, now: Optional[datetime] = None) -> str:
        return today_key(now or self._clock(), tz_name=self._tz_name)

    def get_record(self, number: str) -> StudentAttendance:
        return self._attendance.get_from_server(number)

    def today_status(self, number: str, *, now: Optional[datetime] = None) -> DayStatus:
        return self._attendance.get_from_server(number).day(self.today_key(now=now))

    # --- punch flow ---

    @staticmethod
    def _guard(punch_type: PunchType, status: DayStatus) -> None:
        if punch_type == PunchType.IN:
            if status.has_in:
                raise AlreadyPunchedIn()
            return

        if not status.has_in:
            raise NotPunchedInYet()
        if status.has_out:
            raise AlreadyPunchedOut()

    def _resolve_profile(self, email: Optional[str], cache: Optional[ProfileCache]) -> StudentProfile:
        profile = self._profiles.load_by_email(email, cache)
        if not profile or not profile.number:
            raise ProfileNotFound()
        return profile

    def prepare_punch(
        self,
        email: Optional[str],
        punch_type: PunchType,
        location: LocationProvider,
        *,
        cache: Optional[ProfileCache] = None,
        now: Optional[datetime] = None,
    ) -> PunchPlan:
        """Steps 1-5: everything that must pass before the camera opens."""
        profile = self._resolve_profile(email, cache)

        status = self.today_status(profile.number, now=now)
        self._guard(punch_type, status)

        fix = location.current_position(high_accuracy=True, timeout_s=self._location_timeout_s)
        campus = self._geofence.campus_for(profile.branch)
        loc = self._geofence.check(profile.branch, fix)

        return PunchPlan(profile=profile, punch_type=punch_type, status=status, campus=campus, loc=loc)

    def punch(
        self,
        email: Optional[str],
        punch_type: PunchType,
        location: LocationProvider,
        camera: Camera,
        *,
        cache: Optional[ProfileCache] = None,
        now: Optional[datetime] = None,
    ) -> PunchResult:
        now = now or self._clock()
        try:
            plan = self.prepare_punch(email, punch_type, location, cache=cache, now=now)
            image = camera.capture()
            photo_url = self._photos.upload(
                image,
                number=plan.profile.number,
                date_key=plan.status.date_key,
                now=now,
            )
            result = self._write(plan, photo_url, now)
        except AttendanceError as e:
            logger.info("Punch %s rejected for %s: %s", punch_type.value, email, e.code)
            raise

        logger.info("Punch %s recorded for %s on %s", punch_type.value, plan.profile.number, plan.status.date_key)
        return result

    def _write(self, plan: PunchPlan, photo_url: str, now: datetime) -> PunchResult:
        number = plan.profile.number
        dk = plan.status.date_key

        # Authoritative re-read right before writing; the guards are checked again.
        current = self._attendance.get_from_server(number)
        day = current.day(dk)
        try:
            self._guard(plan.punch_type, day)
        except AttendanceError as cause:
            raise WriteConflict(cause) from cause

        if plan.punch_type == PunchType.IN:
            patch = self._in_patch(plan, current, day, photo_url, now)
            duration_min = None
        else:
            duration_min = self._duration_min(day, now)
            patch = self._out_patch(plan, photo_url, duration_min, now)

        try:
            self._attendance.apply_patch(number, patch, expected_version=current.version)
        except StaleDocumentError:
            fresh = self._attendance.get_from_server(number).day(dk)
            try:
                self._guard(plan.punch_type, fresh)
            except AttendanceError as cause:
                raise WriteConflict(cause) from cause
            raise WriteConflict()

        return PunchResult(
            punch_type=plan.punch_type,
            date_key=dk,
            photo_url=photo_url,
            loc=plan.loc,
            duration_min=duration_min,
        )

    @staticmethod
    def _log_entry(plan: PunchPlan, now: datetime) -> dict:
        entry: dict[str, Any] = {"dateKey": plan.status.date_key, "type": plan.punch_type.value, "at": now}
        if plan.loc:
            entry["loc"] = plan.loc.to_dict()
        return entry

    def _in_patch(
        self,
        plan: PunchPlan,
        current: StudentAttendance,
        day: DayStatus,
        photo_url: str,
        now: datetime,
    ) -> dict:
        dk = plan.status.date_key
        profile = plan.profile

        patch: dict[str, Any] = {
            f"days.{dk}.hasIn": True,
            f"days.{dk}.hasOut": bool(day.has_out),
            f"days.{dk}.inAt": SERVER_TIMESTAMP,
            f"days.{dk}.inAtMs": to_millis(now),
            f"days.{dk}.inPhoto": photo_url,
            "logs": ArrayUnion(self._log_entry(plan, now)),
            "summary.lastAction": PunchType.IN.value,
            "summary.lastActionAt": SERVER_TIMESTAMP,
        }
        if plan.loc:
            patch[f"days.{dk}.inLoc"] = plan.loc.to_dict()
        if profile.name:
            patch["name"] = profile.name
        meta = {k: v for k, v in (("branch", profile.branch), ("course", profile.course)) if v}
        if meta:
            patch["meta"] = meta

        # Day counter moves once per date, on the first IN only.
        if not day.has_in:
            patch["summary.totalDays"] = current.summary.total_days + 1
        return patch

    @staticmethod
    def _duration_min(day: DayStatus, now: datetime) -> int:
        now_ms = to_millis(now)
        if day.in_at_ms is not None:
            in_ms = day.in_at_ms
        elif day.in_at is not None:
            in_ms = to_millis(day.in_at)
        else:
            in_ms = now_ms
        return max(0, round_half_up((now_ms - in_ms) / 60000))

    def _out_patch(self, plan: PunchPlan, photo_url: str, duration_min: int, now: datetime) -> dict:
        dk = plan.status.date_key
        patch: dict[str, Any] = {
            f"days.{dk}.hasOut": True,
            f"days.{dk}.outAt": SERVER_TIMESTAMP,
            f"days.{dk}.outAtMs": to_millis(now),
            f"days.{dk}.durationMin": duration_min,
            f"days.{dk}.outPhoto": photo_url,
            "logs": ArrayUnion(self._log_entry(plan, now)),
            "summary.lastAction": PunchType.OUT.value,
            "summary.lastActionAt": SERVER_TIMESTAMP,
        }
        if plan.loc:
            patch[f"days.{dk}.outLoc"] = plan.loc.to_dict()
        return patch

    # --- history ---

    def _clock_text(self, millis: Optional[int], ts: Optional[datetime]) -> str:
        candidates = (try_from_millis(millis) if millis is not None else None, ts)
        for value in candidates:
            if value is None:
                continue
            try:
                return format_clock(value, tz_name=self._tz_name)
            except OverflowError:
                # edge of the datetime range, unusable in the local zone
                continue
        return DayState.NONE.value

    def _history_row(self, date_key: str, d: DayEntry) -> HistoryRow:
        if d.has_in:
            status = DayState.DONE if d.has_out else DayState.IN_ONLY
        else:
            status = DayState.NONE
        return HistoryRow(
            date_key=date_key,
            in_text=self._clock_text(d.in_at_ms, d.in_at),
            out_text=self._clock_text(d.out_at_ms, d.out_at),
            duration_min=d.duration_min,
            status=status,
        )

    def history(self, number: str) -> list[HistorySection]:
        """Days grouped by month, newest month first and newest day first."""
        days = self._attendance.get_from_server(number).days

        grouped: dict[tuple[int, int], list[HistoryRow]] = {}
        for dk, entry in days.items():
            try:
                day = parse_iso_date(dk)
            except ValueError:
                logger.debug("Skipping malformed date key %r for %s", dk, number)
                continue
            grouped.setdefault((day.year, day.month), []).append(self._history_row(dk, entry))

        sections = []
        for (year, month) in sorted(grouped, reverse=True):
            rows = sorted(grouped[(year, month)], key=lambda r: r.date_key, reverse=True)
            title = datetime(year, month, 1).strftime("%B %Y")
            sections.append(HistorySection(title=title, rows=rows))
        return sections
