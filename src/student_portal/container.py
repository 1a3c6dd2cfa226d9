from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .accounts.document_account_repository import DocumentAccountRepository
from .accounts.service import AuthService
from .attendance.document_attendance_repository import DocumentAttendanceRepository
from .attendance.geofence import GeofenceConfig
from .attendance.service import AttendanceService
from .content.repository import DocumentContentRepository
from .content.service import ContentService
from .core.constants import DEFAULT_GEOLOCATION_TIMEOUT_SECONDS, DEFAULT_REFERENCE_TIMEZONE
from .database.connection import DatabaseConnection
from .documents.mysql_document_repository import MySQLDocumentRepository
from .documents.repository import DocumentRepository
from .lectures.document_lecture_repository import DocumentLectureRepository
from .lectures.service import LectureService
from .results.repository import DocumentResultRepository
from .results.service import ResultService
from .storage.local_photo_storage import LocalPhotoStorage
from .storage.service import PhotoUploadService
from .students.document_student_repository import DocumentStudentRepository
from .students.service import ProfileService
from .support.service import HelpDeskService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    documents: DocumentRepository

    students_repo: DocumentStudentRepository
    accounts_repo: DocumentAccountRepository
    attendance_repo: DocumentAttendanceRepository
    lectures_repo: DocumentLectureRepository
    results_repo: DocumentResultRepository
    content_repo: DocumentContentRepository
    photo_storage: LocalPhotoStorage

    auth_service: AuthService
    profile_service: ProfileService
    attendance_service: AttendanceService
    lecture_service: LectureService
    result_service: ResultService
    content_service: ContentService
    help_desk_service: HelpDeskService


def build_container(*, db_config: dict, settings: Any) -> Container:
    conn = DatabaseConnection.from_dict(db_config)
    return build_container_for(MySQLDocumentRepository(conn), settings=settings, conn=conn)


def build_container_for(
    documents: DocumentRepository,
    *,
    settings: Any,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    tz_name = getattr(settings, "REFERENCE_TIMEZONE", DEFAULT_REFERENCE_TIMEZONE)

    students_repo = DocumentStudentRepository(documents)
    accounts_repo = DocumentAccountRepository(documents)
    attendance_repo = DocumentAttendanceRepository(documents)
    lectures_repo = DocumentLectureRepository(documents)
    results_repo = DocumentResultRepository(documents)
    content_repo = DocumentContentRepository(documents)
    photo_storage = LocalPhotoStorage(
        getattr(settings, "UPLOAD_FOLDER", "static/uploads"),
        getattr(settings, "UPLOAD_URL_PREFIX", "/uploads"),
    )

    geofence = GeofenceConfig.from_settings(
        radius_m=getattr(settings, "GEOFENCE_RADIUS_M"),
        default_center=getattr(settings, "DEFAULT_CENTER"),
        branch_locations=getattr(settings, "BRANCH_LOCATIONS", {}),
    )

    auth_service = AuthService(accounts_repo)
    profile_service = ProfileService(students_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        profile_service,
        PhotoUploadService(photo_storage),
        geofence,
        tz_name=tz_name,
        location_timeout_s=getattr(settings, "GEOLOCATION_TIMEOUT_SECONDS", DEFAULT_GEOLOCATION_TIMEOUT_SECONDS),
    )
    lecture_service = LectureService(lectures_repo, tz_name=tz_name)
    result_service = ResultService(results_repo)
    content_service = ContentService(content_repo)
    help_desk_service = HelpDeskService(
        phone=getattr(settings, "HELP_PHONE_NUMBER", ""),
        country_code=getattr(settings, "HELP_COUNTRY_CODE", ""),
        message=getattr(settings, "HELP_MESSAGE", ""),
    )

    return Container(
        conn=conn,
        documents=documents,
        students_repo=students_repo,
        accounts_repo=accounts_repo,
        attendance_repo=attendance_repo,
        lectures_repo=lectures_repo,
        results_repo=results_repo,
        content_repo=content_repo,
        photo_storage=photo_storage,
        auth_service=auth_service,
        profile_service=profile_service,
        attendance_service=attendance_service,
        lecture_service=lecture_service,
        result_service=result_service,
        content_service=content_service,
        help_desk_service=help_desk_service,
    )
