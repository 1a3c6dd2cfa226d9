from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_email, error_response, login_required, profile_cache, system_error_response
from ..container import Container
from ..core.exceptions import ProfileNotFound


def register(app: Flask, container: Container) -> None:
    def _profile():
        profile = container.profile_service.load_by_email(current_email(), profile_cache())
        if not profile:
            raise ProfileNotFound()
        return profile

    def _schedule(which: str):
        try:
            schedule = container.lecture_service.today_tomorrow(_profile())
        except ProfileNotFound as e:
            return error_response(e)
        except Exception:
            return system_error_response("Failed to load lectures")
        lectures = schedule.today if which == "today" else schedule.tomorrow
        return jsonify({"success": True, "day": which, "lectures": [l.to_dict() for l in lectures]}), 200

    @app.route("/api/lectures/today", endpoint="lectures_today")
    @login_required
    def lectures_today():
        return _schedule("today")

    @app.route("/api/lectures/tomorrow", endpoint="lectures_tomorrow")
    @login_required
    def lectures_tomorrow():
        return _schedule("tomorrow")

    @app.route("/api/lectures/branch", endpoint="lectures_branch")
    @login_required
    def lectures_branch():
        """Next month of lectures for the student's branch."""
        try:
            profile = _profile()
            rows = container.lecture_service.branch_month(profile.branch)
        except ProfileNotFound as e:
            return error_response(e)
        except Exception:
            return system_error_response("Failed to load branch lectures")
        return jsonify({"success": True, "branch": profile.branch, "lectures": [l.to_dict() for l in rows]}), 200
