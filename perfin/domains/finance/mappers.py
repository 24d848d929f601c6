"""Model → JSON-ready dict mappers for finance domain."""

from __future__ import annotations

from decimal import Decimal

from perfin.domains.finance.models.category_models import Category
from perfin.domains.finance.models.ledger_models import Account, Transaction
from perfin.domains.finance.models.lending_models import LendingRecord
from perfin.domains.finance.services.ledger_service import Reconciliation


def money(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def map_account(account: Account) -> dict:
    return {
        "id": account.id,
        "name": account.name,
        "type": account.account_type,
        "balance": money(account.balance),
        "opening_balance": money(account.opening_balance),
        "currency": account.currency,
        "created_at": account.created_at.isoformat() if account.created_at else None,
        "updated_at": account.updated_at.isoformat() if account.updated_at else None,
    }


def map_transaction(txn: Transaction) -> dict:
    return {
        "id": txn.id,
        "account_id": txn.account_id,
        "amount": money(txn.amount),
        "type": txn.direction,
        "description": txn.description,
        "category": txn.category,
        "transaction_date": txn.transaction_date.isoformat() if txn.transaction_date else None,
        "created_at": txn.created_at.isoformat() if txn.created_at else None,
        "updated_at": txn.updated_at.isoformat() if txn.updated_at else None,
    }


def map_category(category: Category) -> dict:
    return {"id": category.id, "name": category.name, "type": category.type}


def map_lending_record(record: LendingRecord) -> dict:
    return {
        "id": record.id,
        "type": record.type,
        "person": record.person,
        "amount": money(record.amount),
        "date": record.date.isoformat(),
        "due_date": record.due_date.isoformat() if record.due_date else None,
        "status": record.status,
        "notes": record.notes,
    }


def map_reconciliation(result: Reconciliation) -> dict:
    return {
        "account_id": result.account_id,
        "stored_balance": money(result.stored_balance),
        "opening_balance": money(result.opening_balance),
        "transactions_total": money(result.transactions_total),
        "expected_balance": money(result.expected_balance),
        "drift": money(result.drift),
        "consistent": result.consistent,
    }
