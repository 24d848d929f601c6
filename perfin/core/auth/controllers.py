"""Auth HTTP controllers: the single-owner login gate."""

from __future__ import annotations

from flask import Blueprint, jsonify, request, session
from flask_jwt_extended import jwt_required
from pydantic import ValidationError

from perfin.core.auth.auth_service import authenticate_owner, issue_tokens
from perfin.core.auth.csrf import rotate_csrf_token
from perfin.core.users.schemas import LoginRequest, serialize_user
from perfin.core.users.services import get_user
from perfin.core.utils.decorators import current_owner_id
from perfin.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    # A fresh login never inherits a stale session cookie.
    session.clear()
    payload = request.get_json(silent=True) or {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return (
            jsonify(
                {
                    "ok": False,
                    "error": "bad_request",
                    "details": exc.errors(include_url=False, include_context=False, include_input=False),
                }
            ),
            400,
        )
    owner = authenticate_owner(data.password)
    if not owner:
        return jsonify({"ok": False, "error": "invalid_credentials", "message": "Invalid password"}), 401
    return jsonify(
        {
            "ok": True,
            **issue_tokens(owner),
            "csrf_token": rotate_csrf_token(),
            "user": serialize_user(owner).model_dump(),
        }
    )


@auth_bp.get("/me")
@jwt_required()
def me():
    user = get_user(current_owner_id())
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "user": serialize_user(user).model_dump()})
