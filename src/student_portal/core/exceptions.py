from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"
    default_message = "Request could not be completed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"
    default_message = "Invalid input."


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "AUTHENTICATION_FAILED"
    default_message = "Invalid number or password."


class AuthorizationError(DomainError):
    """Raised when a request has no authenticated student behind it."""

    code = "NOT_AUTHORIZED"
    default_message = "Please log in to continue."


class StaleDocumentError(DomainError):
    """Raised by the document store when a conditional write lost a race."""

    code = "STALE_DOCUMENT"
    default_message = "Document was modified concurrently."


class ResultNotPublished(DomainError):
    code = "RESULT_NOT_PUBLISHED"
    default_message = "Result is not updated. Contact your branch."


# --- Attendance punch taxonomy ---


class AttendanceError(DomainError):
    """Base for every failure of the punch flow.

    Each subclass is a hard stop: the flow aborts and the message is shown
    to the student verbatim. None of them is retried automatically.
    """

    code = "ATTENDANCE_ERROR"


class ProfileNotFound(AttendanceError):
    code = "PROFILE_NOT_FOUND"
    default_message = "Student profile not found."


class AlreadyPunchedIn(AttendanceError):
    code = "ALREADY_PUNCHED_IN"
    default_message = "You have already punched in today."


class AlreadyPunchedOut(AttendanceError):
    code = "ALREADY_PUNCHED_OUT"
    default_message = "You have already punched out today."


class NotPunchedInYet(AttendanceError):
    code = "NOT_PUNCHED_IN"
    default_message = "You must punch in before you can punch out."


class LocationDenied(AttendanceError):
    code = "LOCATION_DENIED"
    default_message = "Location permission denied. Please enable it in your browser."


class LocationUnavailable(AttendanceError):
    code = "LOCATION_UNAVAILABLE"
    default_message = "Could not get your location. Please try again."


class OutOfGeofence(AttendanceError):
    code = "OUT_OF_GEOFENCE"

    def __init__(self, dist_m: int, radius_m: float, campus_name: str = "campus"):
        self.dist_m = int(dist_m)
        self.radius_m = radius_m
        self.campus_name = campus_name
        super().__init__(
            f"You are {self.dist_m}m away. You must be within {radius_m:g}m of {campus_name} to punch."
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({"distM": self.dist_m, "radiusM": self.radius_m})
        return data


class CaptureFailed(AttendanceError):
    code = "CAPTURE_FAILED"
    default_message = "Could not capture a photo. Please check camera permissions."


class CaptureCancelled(AttendanceError):
    code = "CAPTURE_CANCELLED"
    default_message = "Photo capture was cancelled."


class UploadFailed(AttendanceError):
    code = "UPLOAD_FAILED"
    default_message = "Failed to upload your selfie. Please try again."


class WriteConflict(AttendanceError):
    """Write-time re-validation failed.

    When the fresh read shows a guard violation (a late ``AlreadyPunchedOut``
    and friends) that failure is kept as ``cause`` and its message is reused.
    """

    code = "WRITE_CONFLICT"
    default_message = "Your attendance changed while saving. Please try again."

    def __init__(self, cause: Optional[AttendanceError] = None):
        self.cause = cause
        super().__init__(cause.message if cause else None)

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.cause is not None:
            data["cause"] = self.cause.code
        return data
