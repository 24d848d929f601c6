"""Account store: owner-scoped reads and atomic balance deltas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List

from sqlalchemy import select, update

from perfin.domains.finance.errors import NotFoundError
from perfin.domains.finance.models.ledger_models import Account
from perfin.extensions import db


class AccountRepository:
    """Persistence for accounts. Never commits; callers own the transactional unit."""

    def __init__(self, session=None):
        self._session = session or db.session

    def get_account(self, account_id: int, user_id: int) -> Account:
        account = self._session.execute(
            select(Account).where(Account.id == account_id, Account.user_id == user_id)
        ).scalar_one_or_none()
        if account is None:
            raise NotFoundError("Account not found or does not belong to user.")
        return account

    def find_by_name(self, user_id: int, name: str) -> Account | None:
        return self._session.execute(
            select(Account).where(Account.user_id == user_id, Account.name == name)
        ).scalar_one_or_none()

    def list_accounts(self, user_id: int) -> List[Account]:
        return list(
            self._session.execute(
                select(Account).where(Account.user_id == user_id).order_by(Account.created_at.asc(), Account.id.asc())
            ).scalars()
        )

    def insert_account(self, account: Account) -> Account:
        self._session.add(account)
        self._session.flush()
        return account

    def delete_account(self, account_id: int, user_id: int) -> Account:
        account = self.get_account(account_id, user_id)
        self._session.delete(account)
        self._session.flush()
        return account

    def apply_balance_delta(self, account_id: int, user_id: int, delta: Decimal) -> Decimal:
        """Add ``delta`` to the stored balance in one relative UPDATE and return the new balance.

        The increment is evaluated by the database (``balance = balance + :delta``),
        so concurrent writers serialize on the row instead of overwriting each
        other's read-modify-write results.
        """
        result = self._session.execute(
            update(Account)
            .where(Account.id == account_id, Account.user_id == user_id)
            .values(balance=Account.balance + delta, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Account not found or does not belong to user.")
        return self.refresh(account_id, user_id).balance

    def set_balance(self, account_id: int, user_id: int, new_balance: Decimal) -> Account:
        """Administrative overwrite of the balance.

        opening_balance absorbs the difference in the same statement, so the
        transaction-derived part of the balance is untouched.
        """
        result = self._session.execute(
            update(Account)
            .where(Account.id == account_id, Account.user_id == user_id)
            .ordered_values(
                (Account.opening_balance, Account.opening_balance + (new_balance - Account.balance)),
                (Account.balance, new_balance),
                (Account.updated_at, datetime.utcnow()),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Account not found or does not belong to user.")
        return self.refresh(account_id, user_id)

    def refresh(self, account_id: int, user_id: int) -> Account:
        """Reload the account, overwriting any stale copy held in the session."""
        account = self._session.execute(
            select(Account)
            .where(Account.id == account_id, Account.user_id == user_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if account is None:
            raise NotFoundError("Account not found or does not belong to user.")
        return account


__all__ = ["AccountRepository"]
