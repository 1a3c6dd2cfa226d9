from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import login_required, system_error_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/banners", endpoint="banners")
    @login_required
    def banners():
        rows = container.content_service.banners()
        return jsonify({"success": True, "banners": [b.to_dict() for b in rows]}), 200

    @app.route("/api/announcements", endpoint="announcements")
    @login_required
    def announcements():
        try:
            rows = container.content_service.announcements()
        except Exception:
            return system_error_response("Failed to load announcements")
        return jsonify({"success": True, "announcements": [a.to_dict() for a in rows]}), 200

    @app.route("/api/help", endpoint="help_desk")
    @login_required
    def help_desk():
        return jsonify({"success": True, "contact": container.help_desk_service.contact().to_dict()}), 200
