"""Transaction API controllers.

Every mutation goes through the ledger service, so responses always carry
the balance the database computed for the affected account.
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from perfin.core.utils.decorators import csrf_protected, current_owner_id
from perfin.core.utils.pagination import page_args, page_count
from perfin.domains.finance.controllers.common import error_response, parse_body
from perfin.domains.finance.errors import FinanceError
from perfin.domains.finance.mappers import map_transaction, money
from perfin.domains.finance.schemas.finance_schemas import (
    TransactionCreate,
    TransactionFilters,
    TransactionUpdate,
)
from perfin.domains.finance.services import ledger_service
from perfin.extensions import limiter

transactions_api_bp = Blueprint("finance_transactions_api", __name__)


def _ledger_payload(result: ledger_service.LedgerResult) -> dict:
    return {
        "ok": True,
        "transaction": map_transaction(result.transaction),
        "updated_account_balance": money(result.account_balance),
    }


@transactions_api_bp.get("/transactions")
@jwt_required()
def list_transactions():
    filters, error = parse_body(TransactionFilters, {k: v for k, v in request.args.items() if v != ""})
    if error:
        return error
    page, per_page = page_args(request.args)
    items, total = ledger_service.list_transactions(
        current_owner_id(), page=page, per_page=per_page, **filters.model_dump()
    )
    return jsonify(
        {
            "ok": True,
            "transactions": [map_transaction(t) for t in items],
            "page": page,
            "per_page": per_page,
            "pages": page_count(total, per_page),
            "total": total,
        }
    )


@transactions_api_bp.get("/transactions/<int:transaction_id>")
@jwt_required()
def get_transaction(transaction_id: int):
    try:
        txn = ledger_service.get_transaction(current_owner_id(), transaction_id)
    except FinanceError as exc:
        return error_response(exc)
    return jsonify({"ok": True, "transaction": map_transaction(txn)})


@transactions_api_bp.post("/transactions")
@jwt_required()
@csrf_protected
@limiter.limit("120/minute")
def create_transaction():
    data, error = parse_body(TransactionCreate, request.get_json(silent=True) or {})
    if error:
        return error
    try:
        result = ledger_service.record_transaction(
            current_owner_id(),
            account_id=data.account_id,
            amount=data.amount,
            direction=data.direction,
            description=data.description,
            category=data.category,
            transaction_date=data.transaction_date,
        )
    except FinanceError as exc:
        return error_response(exc)
    return jsonify(_ledger_payload(result)), 201


@transactions_api_bp.route("/transactions/<int:transaction_id>", methods=["PATCH", "PUT"])
@jwt_required()
@csrf_protected
def update_transaction(transaction_id: int):
    data, error = parse_body(TransactionUpdate, request.get_json(silent=True) or {})
    if error:
        return error
    try:
        result = ledger_service.revise_transaction(
            current_owner_id(), transaction_id, data.model_dump(exclude_unset=True)
        )
    except FinanceError as exc:
        return error_response(exc)
    return jsonify(_ledger_payload(result))


@transactions_api_bp.delete("/transactions/<int:transaction_id>")
@jwt_required()
@csrf_protected
def delete_transaction(transaction_id: int):
    try:
        result = ledger_service.remove_transaction(current_owner_id(), transaction_id)
    except FinanceError as exc:
        return error_response(exc)
    payload = _ledger_payload(result)
    payload["id"] = transaction_id
    return jsonify(payload)
