"""Ledger consistency service.

The only code path allowed to move an account's stored balance in response
to a transaction mutation. Each public mutation runs as one transactional
unit: the balance delta(s) and the transaction row change together or not
at all, and the caller always gets the balance the database computed.

Sign convention: ``delta(direction, amount)`` is ``+amount`` for income and
``-amount`` for expense; reversing a transaction applies ``-delta``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import case, func, select

from perfin.core.utils.unit_of_work import atomic
from perfin.domains.finance.errors import DataIntegrityError, InvalidInputError, NotFoundError
from perfin.domains.finance.models.ledger_models import (
    DIRECTION_INCOME,
    DIRECTIONS,
    Transaction,
)
from perfin.domains.finance.repositories.account_repository import AccountRepository
from perfin.domains.finance.repositories.transaction_repository import (
    UPDATABLE_FIELDS,
    TransactionRepository,
)
from perfin.extensions import db

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal(".01")
MAX_AMOUNT = Decimal("9999999999999.99")


@dataclass(frozen=True)
class LedgerResult:
    transaction: Transaction
    account_balance: Decimal


@dataclass(frozen=True)
class Reconciliation:
    account_id: int
    stored_balance: Decimal
    opening_balance: Decimal
    transactions_total: Decimal

    @property
    def expected_balance(self) -> Decimal:
        return (self.opening_balance + self.transactions_total).quantize(TWO_PLACES)

    @property
    def drift(self) -> Decimal:
        return (self.stored_balance - self.expected_balance).quantize(TWO_PLACES)

    @property
    def consistent(self) -> bool:
        return self.drift == 0


# ==================== Normalization ====================


def delta(direction: str, amount: Decimal) -> Decimal:
    return amount if direction == DIRECTION_INCOME else -amount


def normalize_amount(raw: Any) -> Decimal:
    """Parse a strictly positive money amount, rounded to cents."""
    if isinstance(raw, bool):
        raise InvalidInputError("Amount must be a positive number.")
    try:
        amount = Decimal(str(raw)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInputError("Amount must be a positive number.")
    if not amount.is_finite() or amount <= 0 or amount > MAX_AMOUNT:
        raise InvalidInputError("Amount must be a positive number.")
    return amount


def normalize_direction(raw: Any) -> str:
    direction = str(raw or "").strip().lower()
    if direction not in DIRECTIONS:
        raise InvalidInputError('Type must be "income" or "expense".')
    return direction


def normalize_date(raw: Any, field: str = "transaction_date") -> date:
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw))
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field} must be an ISO date (YYYY-MM-DD).")


def _require_text(raw: Any, field: str) -> str:
    value = str(raw or "").strip()
    if not value:
        raise InvalidInputError(f"{field} must not be empty.")
    return value


def _normalize_id(raw: Any, field: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        raise InvalidInputError(f"{field} must be an integer id.")
    if value <= 0 or isinstance(raw, bool) or (isinstance(raw, (float, Decimal)) and value != raw):
        raise InvalidInputError(f"{field} must be an integer id.")
    return value


def _normalize_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    normalizers = {
        "account_id": lambda v: _normalize_id(v, "account_id"),
        "amount": normalize_amount,
        "direction": normalize_direction,
        "description": lambda v: _require_text(v, "description"),
        "category": lambda v: _require_text(v, "category"),
        "transaction_date": normalize_date,
    }
    return {
        key: normalizers[key](changes[key])
        for key in UPDATABLE_FIELDS
        if key in changes and changes[key] is not None
    }


# ==================== Mutations ====================


def record_transaction(
    user_id: int,
    account_id: Any,
    amount: Any,
    direction: Any,
    description: Any,
    category: Any,
    transaction_date: Any,
    *,
    session=None,
) -> LedgerResult:
    """Insert a transaction and apply its delta to the owning account."""
    fields = {
        "account_id": _normalize_id(account_id, "account_id"),
        "amount": normalize_amount(amount),
        "direction": normalize_direction(direction),
        "description": _require_text(description, "description"),
        "category": _require_text(category, "category"),
        "transaction_date": normalize_date(transaction_date),
    }

    with atomic(session) as s:
        accounts = AccountRepository(s)
        # Applying the delta first doubles as the ownership check: NotFound aborts before the insert.
        balance = accounts.apply_balance_delta(
            fields["account_id"], user_id, delta(fields["direction"], fields["amount"])
        )
        record = TransactionRepository(s).insert(Transaction(user_id=user_id, **fields))

    logger.info(
        "Recorded %s transaction %s of %s on account %s (user %s); balance now %s",
        record.direction,
        record.id,
        record.amount,
        record.account_id,
        user_id,
        balance,
    )
    return LedgerResult(transaction=record, account_balance=balance)


def revise_transaction(
    user_id: int,
    transaction_id: int,
    changes: Mapping[str, Any],
    *,
    session=None,
) -> LedgerResult:
    """Apply a partial update, moving the balance effect to the new amount/direction/account.

    Runs reverse-then-reapply inside one unit: the prior effect is removed from
    the current account, the merged fields are validated and written, and the
    new effect lands on the (possibly different) target account. A failure at
    any step, including validation after the reversal, rolls everything back.
    """
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise InvalidInputError(f"Unsupported fields: {', '.join(sorted(unknown))}.")

    with atomic(session) as s:
        accounts = AccountRepository(s)
        transactions = TransactionRepository(s)

        record = transactions.get_by_id(transaction_id, user_id, for_update=True)
        old_account_id = record.account_id
        try:
            accounts.apply_balance_delta(old_account_id, user_id, -delta(record.direction, record.amount))
        except NotFoundError:
            raise NotFoundError("Account linked to this transaction no longer exists.")

        merged = _normalize_changes(changes)
        new_account_id = merged.get("account_id", old_account_id)
        if new_account_id != old_account_id:
            try:
                accounts.get_account(new_account_id, user_id)
            except NotFoundError:
                raise NotFoundError("New associated account not found or does not belong to user.")

        record = transactions.update_fields(transaction_id, user_id, merged)
        balance = accounts.apply_balance_delta(record.account_id, user_id, delta(record.direction, record.amount))

    logger.info(
        "Revised transaction %s (user %s): account %s -> %s, fields %s; balance now %s",
        record.id,
        user_id,
        old_account_id,
        record.account_id,
        sorted(merged),
        balance,
    )
    return LedgerResult(transaction=record, account_balance=balance)


def remove_transaction(user_id: int, transaction_id: int, *, session=None) -> LedgerResult:
    """Delete a transaction and reverse its effect on the owning account.

    A transaction whose account vanished is a broken reference: the delete is
    rolled back and ``DataIntegrityError`` is raised rather than leaving the
    balance uncorrected.
    """
    with atomic(session) as s:
        record = TransactionRepository(s).delete_by_id(transaction_id, user_id)
        try:
            balance = AccountRepository(s).apply_balance_delta(
                record.account_id, user_id, -delta(record.direction, record.amount)
            )
        except NotFoundError as exc:
            logger.error(
                "Transaction %s (user %s) references missing account %s; delete rolled back",
                transaction_id,
                user_id,
                record.account_id,
            )
            raise DataIntegrityError(
                "Associated account not found after transaction deletion. Data inconsistency detected."
            ) from exc

    logger.info(
        "Removed transaction %s from account %s (user %s); balance now %s",
        transaction_id,
        record.account_id,
        user_id,
        balance,
    )
    return LedgerResult(transaction=record, account_balance=balance)


# ==================== Reads ====================


def get_transaction(user_id: int, transaction_id: int) -> Transaction:
    return TransactionRepository().get_by_id(transaction_id, user_id)


def list_transactions(
    user_id: int,
    *,
    page: int = 1,
    per_page: int = 50,
    account_id: Optional[int] = None,
    direction: Optional[str] = None,
    category: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> Tuple[List[Transaction], int]:
    """Owner-scoped transactions, newest first, with the unpaginated total."""
    return TransactionRepository().list_transactions(
        user_id,
        page=page,
        per_page=per_page,
        account_id=account_id,
        direction=direction,
        category=category,
        date_from=date_from,
        date_to=date_to,
    )


def reconcile_account(user_id: int, account_id: int) -> Reconciliation:
    """Compare the cached balance with what the transaction rows imply. Never repairs."""
    account = AccountRepository().refresh(account_id, user_id)
    signed = case(
        (Transaction.direction == DIRECTION_INCOME, Transaction.amount),
        else_=-Transaction.amount,
    )
    total = db.session.execute(
        select(func.coalesce(func.sum(signed), 0)).where(
            Transaction.account_id == account.id, Transaction.user_id == user_id
        )
    ).scalar_one()
    return Reconciliation(
        account_id=account.id,
        stored_balance=Decimal(str(account.balance)).quantize(TWO_PLACES),
        opening_balance=Decimal(str(account.opening_balance or 0)).quantize(TWO_PLACES),
        transactions_total=Decimal(str(total)).quantize(TWO_PLACES),
    )


def reconcile_all(user_id: int) -> List[Reconciliation]:
    return [reconcile_account(user_id, account.id) for account in AccountRepository().list_accounts(user_id)]
