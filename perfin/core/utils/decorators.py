"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import current_app, jsonify
from flask_jwt_extended import get_jwt_identity

from perfin.core.auth.csrf import request_has_valid_csrf_token

F = TypeVar("F", bound=Callable)


def csrf_protected(fn: F) -> F:
    """Validate the CSRF token from the X-CSRF-Token header."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if not current_app.config.get("WTF_CSRF_ENABLED", True):
            return fn(*args, **kwargs)
        if not request_has_valid_csrf_token():
            return jsonify({"ok": False, "error": "csrf_failed"}), 403
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_owner_id() -> int:
    """Owner id carried by the verified JWT; call after @jwt_required()."""
    return int(get_jwt_identity())
