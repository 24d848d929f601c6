"""Finance dashboard API."""

from __future__ import annotations

import datetime as dt

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from perfin.core.utils.decorators import current_owner_id
from perfin.domains.finance.services.dashboard_service import get_dashboard

dashboard_api_bp = Blueprint("finance_dashboard_api", __name__)


@dashboard_api_bp.get("/dashboard")
@jwt_required()
def dashboard():
    as_of = None
    if request.args.get("as_of"):
        try:
            as_of = dt.date.fromisoformat(request.args["as_of"])
        except ValueError:
            return jsonify({"ok": False, "error": "validation_error", "message": "as_of must be YYYY-MM-DD."}), 400
    data = get_dashboard(current_owner_id(), as_of=as_of)
    return jsonify({"ok": True, **data})
