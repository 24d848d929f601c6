"""Account services: CRUD plus the administrative balance edit."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, List

from flask import current_app
from sqlalchemy.exc import IntegrityError

from perfin.core.utils.unit_of_work import atomic
from perfin.domains.finance.errors import ConflictError, InvalidInputError
from perfin.domains.finance.models.ledger_models import Account
from perfin.domains.finance.repositories.account_repository import AccountRepository

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal(".01")
MAX_NAME_LENGTH = 255


def _money(raw: Any) -> Decimal:
    """Parse a balance value; unlike transaction amounts it may be zero or negative."""
    if isinstance(raw, bool):
        raise InvalidInputError("Balance must be a number.")
    try:
        value = Decimal(str(raw)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInputError("Balance must be a number.")
    if not value.is_finite():
        raise InvalidInputError("Balance must be a number.")
    return value


def _clean_name(raw: Any) -> str:
    name = str(raw or "").strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        raise InvalidInputError("Account name is required.")
    return name


def _clean_tag(raw: Any, label: str) -> str:
    value = str(raw or "").strip()
    if not value:
        raise InvalidInputError(f"{label} is required.")
    return value


def list_accounts(user_id: int) -> List[Account]:
    return AccountRepository().list_accounts(user_id)


def get_account(user_id: int, account_id: int) -> Account:
    return AccountRepository().get_account(account_id, user_id)


def create_account(
    user_id: int,
    *,
    name: str,
    account_type: str,
    currency: str | None = None,
    balance: Any = None,
) -> Account:
    """Create an account; a seed ``balance`` becomes its opening balance."""
    seed = _money(balance) if balance is not None else Decimal("0.00")
    account = Account(
        user_id=user_id,
        name=_clean_name(name),
        account_type=_clean_tag(account_type, "Account type"),
        currency=_clean_tag(currency or current_app.config.get("DEFAULT_CURRENCY", "INR"), "Currency").upper(),
        balance=seed,
        opening_balance=seed,
    )
    with atomic() as session:
        accounts = AccountRepository(session)
        if accounts.find_by_name(user_id, account.name) is not None:
            raise ConflictError("An account with this name already exists.")
        try:
            accounts.insert_account(account)
        except IntegrityError:
            raise ConflictError("An account with this name already exists.")
    logger.info("Created account %s (%s) for user %s with balance %s", account.id, account.name, user_id, seed)
    return account


def update_account(user_id: int, account_id: int, **fields) -> Account:
    """Partial update. Supplying ``balance`` is an administrative edit, not a transaction."""
    with atomic() as session:
        accounts = AccountRepository(session)
        account = accounts.get_account(account_id, user_id)

        if fields.get("name") is not None:
            name = _clean_name(fields["name"])
            existing = accounts.find_by_name(user_id, name)
            if existing is not None and existing.id != account.id:
                raise ConflictError("An account with this name already exists.")
            account.name = name
        if fields.get("account_type") is not None:
            account.account_type = _clean_tag(fields["account_type"], "Account type")
        if fields.get("currency") is not None:
            account.currency = _clean_tag(fields["currency"], "Currency").upper()
        try:
            session.flush()
        except IntegrityError:
            raise ConflictError("An account with this name already exists.")

        if fields.get("balance") is not None:
            new_balance = _money(fields["balance"])
            account = accounts.set_balance(account.id, user_id, new_balance)
            logger.info("Administrative balance edit on account %s (user %s): now %s", account.id, user_id, new_balance)
    return account


def delete_account(user_id: int, account_id: int) -> Account:
    """Delete an account together with its transactions."""
    with atomic() as session:
        account = AccountRepository(session).delete_account(account_id, user_id)
    logger.info("Deleted account %s (user %s) and its transactions", account_id, user_id)
    return account
