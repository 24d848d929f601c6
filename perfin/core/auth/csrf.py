"""Session-backed CSRF tokens handed out by the login gate."""

from __future__ import annotations

import secrets
from flask import request, session

CSRF_TOKEN_SESSION_KEY = "_csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def rotate_csrf_token() -> str:
    """Issue a fresh token for a new login and store it in the session."""
    token = secrets.token_hex(32)
    session[CSRF_TOKEN_SESSION_KEY] = token
    return token


def request_has_valid_csrf_token() -> bool:
    token = request.headers.get(CSRF_HEADER) or ""
    expected = session.get(CSRF_TOKEN_SESSION_KEY) or ""
    if not token or not expected:
        return False
    return secrets.compare_digest(token, expected)
