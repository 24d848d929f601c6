"""Account API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from perfin.core.utils.decorators import csrf_protected, current_owner_id
from perfin.domains.finance.controllers.common import error_response, parse_body
from perfin.domains.finance.errors import FinanceError
from perfin.domains.finance.mappers import map_account, map_reconciliation
from perfin.domains.finance.schemas.finance_schemas import AccountCreate, AccountUpdate
from perfin.domains.finance.services import account_service, ledger_service
from perfin.extensions import limiter

accounts_api_bp = Blueprint("finance_accounts_api", __name__)


@accounts_api_bp.get("/accounts")
@jwt_required()
def list_accounts():
    accounts = account_service.list_accounts(current_owner_id())
    return jsonify({"ok": True, "accounts": [map_account(a) for a in accounts]})


@accounts_api_bp.post("/accounts")
@jwt_required()
@csrf_protected
@limiter.limit("60/minute")
def create_account():
    data, error = parse_body(AccountCreate, request.get_json(silent=True) or {})
    if error:
        return error
    try:
        account = account_service.create_account(
            current_owner_id(),
            name=data.name,
            account_type=data.account_type,
            currency=data.currency,
            balance=data.balance,
        )
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "account": map_account(account)}), 201


@accounts_api_bp.get("/accounts/<int:account_id>")
@jwt_required()
def get_account(account_id: int):
    try:
        account = account_service.get_account(current_owner_id(), account_id)
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "account": map_account(account)})


@accounts_api_bp.route("/accounts/<int:account_id>", methods=["PATCH", "PUT"])
@jwt_required()
@csrf_protected
def update_account(account_id: int):
    data, error = parse_body(AccountUpdate, request.get_json(silent=True) or {})
    if error:
        return error
    try:
        account = account_service.update_account(
            current_owner_id(), account_id, **data.model_dump(exclude_none=True)
        )
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "account": map_account(account)})


@accounts_api_bp.delete("/accounts/<int:account_id>")
@jwt_required()
@csrf_protected
def delete_account(account_id: int):
    try:
        account_service.delete_account(current_owner_id(), account_id)
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "id": account_id})


@accounts_api_bp.get("/accounts/<int:account_id>/reconciliation")
@jwt_required()
def reconcile_account(account_id: int):
    """Report drift between the stored balance and the transaction history."""
    try:
        result = ledger_service.reconcile_account(current_owner_id(), account_id)
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "reconciliation": map_reconciliation(result)})
