from __future__ import annotations

import os

from flask import Flask, jsonify, request, send_from_directory, session

from ..common.web import current_email, error_response, login_required, profile_cache, system_error_response
from ..container import Container
from ..core.enums import PunchType
from ..core.exceptions import DomainError, ValidationError
from .capabilities import SubmittedLocation, SubmittedPhoto


def _punch_type(direction: str) -> PunchType:
    try:
        return PunchType.parse(direction)
    except ValueError:
        raise ValidationError("Invalid attendance type.")


def _payload() -> dict:
    if request.is_json:
        return dict(request.get_json(silent=True) or {})
    return request.form.to_dict()


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/api/attendance/today", endpoint="attendance_today")
    @login_required
    def attendance_today():
        try:
            status = svc.today_status(session["number"])
        except Exception:
            return system_error_response("System error while reading today's attendance")
        return jsonify({"success": True, "today": status.to_dict()}), 200

    @app.route("/api/attendance/history", endpoint="attendance_history")
    @login_required
    def attendance_history():
        try:
            sections = svc.history(session["number"])
        except Exception:
            return system_error_response("System error while loading attendance history")

        months = [s.title for s in sections]
        selected = request.args.get("month") or (months[0] if months else None)
        return jsonify(
            {
                "success": True,
                "months": months,
                "selected": selected,
                "rows": [
                    {
                        "dateKey": r.date_key,
                        "inText": r.in_text,
                        "outText": r.out_text,
                        "durationMin": r.duration_min,
                        "status": r.status.value,
                    }
                    for s in sections
                    if s.title == selected
                    for r in s.rows
                ],
            }
        ), 200

    @app.route("/api/attendance/<direction>/check", methods=["POST"], endpoint="attendance_check")
    @login_required
    def attendance_check(direction: str):
        """Pre-check before the camera opens: profile, status, location, geofence."""
        try:
            plan = svc.prepare_punch(
                current_email(),
                _punch_type(direction),
                SubmittedLocation.from_payload(_payload()),
                cache=profile_cache(),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("System error while checking attendance")
        return jsonify({"success": True, "plan": plan.to_dict()}), 200

    @app.route("/api/attendance/<direction>", methods=["POST"], endpoint="attendance_punch")
    @login_required
    def attendance_punch(direction: str):
        payload = _payload()
        upload = request.files.get("photo")
        camera = SubmittedPhoto(
            data_url=payload.get("photo"),
            file_bytes=upload.read() if upload else None,
        )
        try:
            result = svc.punch(
                current_email(),
                _punch_type(direction),
                SubmittedLocation.from_payload(payload),
                camera,
                cache=profile_cache(),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("Failed to submit attendance")

        return jsonify(
            {
                "success": True,
                "message": f"Successfully Punched {result.punch_type.value}!",
                "result": result.to_dict(),
            }
        ), 200

    @app.route("/uploads/<path:filename>", endpoint="uploaded_file")
    @login_required
    def uploaded_file(filename: str):
        return send_from_directory(os.path.abspath(container.photo_storage.upload_folder), filename)
