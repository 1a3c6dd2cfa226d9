from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.web import current_email, error_response, login_required, profile_cache, system_error_response
from ..container import Container
from ..core.exceptions import DomainError, ProfileNotFound

logger = logging.getLogger(__name__)

MENU = (
    {"key": "today", "title": "Today", "href": "/api/lectures/today"},
    {"key": "tomorrow", "title": "Tomorrow", "href": "/api/lectures/tomorrow"},
    {"key": "results", "title": "Results", "href": "/api/results"},
    {"key": "attendance", "title": "Attendance", "href": "/api/attendance/today"},
    {"key": "helpdesk", "title": "Helpdesk", "href": "/api/help"},
    {"key": "announcements", "title": "Announcements", "href": "/api/announcements"},
)


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        payload = request.get_json(silent=True) or request.form
        number = str(payload.get("number", ""))
        password = str(payload.get("password", ""))
        remember = bool(payload.get("remember_me"))

        try:
            s_user = container.auth_service.authenticate(number, password)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("System error while logging in")

        session.clear()
        session.permanent = remember
        app.permanent_session_lifetime = timedelta(days=7)
        session["email"] = s_user.email
        session["number"] = s_user.number

        logger.info("Student %s logged in", s_user.number)
        return jsonify({"success": True, "number": s_user.number}), 200

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        # Also drops the session-scoped profile cache.
        session.clear()
        return jsonify({"success": True}), 200

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        profile = container.profile_service.load_by_email(current_email(), profile_cache())
        if not profile:
            return error_response(ProfileNotFound())
        return jsonify({"success": True, "profile": profile.to_dict()}), 200

    @app.route("/api/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        try:
            profile = container.profile_service.load_by_email(current_email(), profile_cache())
            today = container.attendance_service.today_status(profile.number) if profile else None
            banners = container.content_service.banners()
        except Exception:
            return system_error_response("System error while loading the dashboard")

        return jsonify(
            {
                "success": True,
                "profile": profile.to_dict() if profile else None,
                "today": today.to_dict() if today else None,
                "banners": [b.to_dict() for b in banners],
                "menu": list(MENU),
            }
        ), 200
