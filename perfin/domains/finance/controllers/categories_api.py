"""Category API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from perfin.core.utils.decorators import csrf_protected, current_owner_id
from perfin.domains.finance.controllers.common import error_response, parse_body
from perfin.domains.finance.errors import FinanceError
from perfin.domains.finance.mappers import map_category
from perfin.domains.finance.schemas.finance_schemas import CategoryCreate
from perfin.domains.finance.services import category_service

categories_api_bp = Blueprint("finance_categories_api", __name__)


@categories_api_bp.get("/categories")
@jwt_required()
def list_categories():
    categories = category_service.list_categories(current_owner_id(), request.args.get("type"))
    return jsonify({"ok": True, "categories": [map_category(c) for c in categories]})


@categories_api_bp.post("/categories")
@jwt_required()
@csrf_protected
def create_category():
    data, error = parse_body(CategoryCreate, request.get_json(silent=True) or {})
    if error:
        return error
    try:
        category = category_service.create_category(current_owner_id(), name=data.name, category_type=data.type)
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "category": map_category(category)}), 201


@categories_api_bp.delete("/categories/<int:category_id>")
@jwt_required()
@csrf_protected
def delete_category(category_id: int):
    try:
        category_service.delete_category(current_owner_id(), category_id)
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "id": category_id})
