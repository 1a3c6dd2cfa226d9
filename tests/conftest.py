from __future__ import annotations

import pytest

from fakes import BHAYANDAR, NOW, NUMBER, PASSWORD, InMemoryDocumentRepository, InMemoryPhotoStorage, make_jpeg, seed_student
from student_portal.accounts.document_account_repository import DocumentAccountRepository
from student_portal.accounts.service import AuthService
from student_portal.attendance.document_attendance_repository import DocumentAttendanceRepository
from student_portal.attendance.geofence import GeofenceConfig
from student_portal.attendance.service import AttendanceService
from student_portal.storage.service import PhotoUploadService
from student_portal.students.document_student_repository import DocumentStudentRepository
from student_portal.students.service import ProfileService


@pytest.fixture()
def docs() -> InMemoryDocumentRepository:
    store = InMemoryDocumentRepository()
    seed_student(store)
    return store


@pytest.fixture()
def photos() -> InMemoryPhotoStorage:
    return InMemoryPhotoStorage()


@pytest.fixture()
def jpeg() -> bytes:
    return make_jpeg()


@pytest.fixture()
def geofence() -> GeofenceConfig:
    return GeofenceConfig.from_settings(
        radius_m=50,
        default_center={"name": "ABS Main", "center": {"lat": BHAYANDAR[0], "lng": BHAYANDAR[1]}},
        branch_locations={
            "Bhayandar": {"name": "ABS Bhayandar", "center": {"lat": BHAYANDAR[0], "lng": BHAYANDAR[1]}},
        },
    )


@pytest.fixture()
def attendance_service(docs, photos, geofence) -> AttendanceService:
    return AttendanceService(
        DocumentAttendanceRepository(docs),
        ProfileService(DocumentStudentRepository(docs)),
        PhotoUploadService(photos),
        geofence,
        tz_name="Asia/Kolkata",
        location_timeout_s=10,
        clock=lambda: NOW,
    )


@pytest.fixture()
def auth_service(docs) -> AuthService:
    svc = AuthService(DocumentAccountRepository(docs))
    svc.set_password(NUMBER, PASSWORD)
    return svc
