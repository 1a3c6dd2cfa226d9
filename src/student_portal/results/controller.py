from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import error_response, login_required, system_error_response
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/results", endpoint="results")
    @login_required
    def results():
        try:
            sheet = container.result_service.for_student(session.get("number", ""))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("Failed to load results")
        return jsonify({"success": True, "result": sheet.to_dict()}), 200
