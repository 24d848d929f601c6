"""Lending/borrowing tracker API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from perfin.core.utils.decorators import csrf_protected, current_owner_id
from perfin.domains.finance.controllers.common import error_response, parse_body
from perfin.domains.finance.errors import FinanceError
from perfin.domains.finance.mappers import map_lending_record
from perfin.domains.finance.schemas.finance_schemas import LendingCreate, LendingUpdate
from perfin.domains.finance.services import lending_service

lending_api_bp = Blueprint("finance_lending_api", __name__)


@lending_api_bp.get("/lending-borrowing")
@jwt_required()
def list_entries():
    records = lending_service.list_records(
        current_owner_id(),
        status=request.args.get("status") or None,
        record_type=request.args.get("type") or None,
        search=request.args.get("search") or None,
    )
    return jsonify({"ok": True, "entries": [map_lending_record(r) for r in records]})


@lending_api_bp.get("/lending-borrowing/summary")
@jwt_required()
def summary():
    return jsonify({"ok": True, "summary": lending_service.person_summary(current_owner_id())})


@lending_api_bp.post("/lending-borrowing")
@jwt_required()
@csrf_protected
def create_entry():
    data, error = parse_body(LendingCreate, request.get_json(silent=True) or {})
    if error:
        return error
    try:
        record = lending_service.create_record(current_owner_id(), **data.model_dump())
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "entry": map_lending_record(record)}), 201


@lending_api_bp.get("/lending-borrowing/<int:record_id>")
@jwt_required()
def get_entry(record_id: int):
    try:
        record = lending_service.get_record(current_owner_id(), record_id)
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "entry": map_lending_record(record)})


@lending_api_bp.route("/lending-borrowing/<int:record_id>", methods=["PATCH", "PUT"])
@jwt_required()
@csrf_protected
def update_entry(record_id: int):
    data, error = parse_body(LendingUpdate, request.get_json(silent=True) or {})
    if error:
        return error
    try:
        record = lending_service.update_record(current_owner_id(), record_id, **data.model_dump(exclude_none=True))
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "entry": map_lending_record(record)})


@lending_api_bp.delete("/lending-borrowing/<int:record_id>")
@jwt_required()
@csrf_protected
def delete_entry(record_id: int):
    try:
        lending_service.delete_record(current_owner_id(), record_id)
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "id": record_id})
