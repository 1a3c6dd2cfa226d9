"""Shared helpers for the JSON controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    ProfileNotFound,
    ResultNotPublished,
    WriteConflict,
)
from ..students.cache import ProfileCache

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 401),
    (ProfileNotFound, 404),
    (ResultNotPublished, 404),
    (WriteConflict, 409),
)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "email" not in session:
            return error_response(AuthorizationError())
        return view(*args, **kwargs)

    return wrapper


def current_email() -> Optional[str]:
    return session.get("email")


def profile_cache() -> ProfileCache:
    """Profile cache scoped to the login session (cleared on logout)."""
    return ProfileCache(session)


def error_response(e: DomainError):
    status = 400
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            status = code
            break
    body = {"success": False}
    body.update(e.to_dict())
    return jsonify(body), status


def system_error_response(message: str):
    logger.exception(message)
    return jsonify({"success": False, "code": "SYSTEM_ERROR", "message": message}), 500
