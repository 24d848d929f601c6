"""Transaction store: owner-scoped CRUD over finance_transaction rows."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Query

from perfin.domains.finance.errors import NotFoundError
from perfin.domains.finance.models.ledger_models import Transaction
from perfin.extensions import db

UPDATABLE_FIELDS = ("account_id", "amount", "direction", "description", "category", "transaction_date")


class TransactionRepository:
    """Persistence for transactions. Never commits; callers own the transactional unit."""

    def __init__(self, session=None):
        self._session = session or db.session

    def insert(self, record: Transaction) -> Transaction:
        self._session.add(record)
        self._session.flush()
        return record

    def get_by_id(self, transaction_id: int, user_id: int, *, for_update: bool = False) -> Transaction:
        stmt = select(Transaction).where(Transaction.id == transaction_id, Transaction.user_id == user_id)
        if for_update:
            # Row lock on backends that support it; sqlite serializes writers anyway.
            stmt = stmt.with_for_update()
        record = self._session.execute(stmt).scalar_one_or_none()
        if record is None:
            raise NotFoundError("Transaction not found or does not belong to user.")
        return record

    def update_fields(self, transaction_id: int, user_id: int, partial: Dict[str, Any]) -> Transaction:
        record = self.get_by_id(transaction_id, user_id)
        for key in UPDATABLE_FIELDS:
            if key in partial:
                setattr(record, key, partial[key])
        self._session.flush()
        return record

    def delete_by_id(self, transaction_id: int, user_id: int) -> Transaction:
        """Delete the row and return the deleted record (attributes stay readable)."""
        record = self.get_by_id(transaction_id, user_id, for_update=True)
        self._session.delete(record)
        self._session.flush()
        return record

    def query_for_user(
        self,
        user_id: int,
        *,
        account_id: Optional[int] = None,
        direction: Optional[str] = None,
        category: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Query:
        query = self._session.query(Transaction).filter(Transaction.user_id == user_id)
        if account_id:
            query = query.filter(Transaction.account_id == account_id)
        if direction:
            query = query.filter(Transaction.direction == direction)
        if category:
            query = query.filter(Transaction.category == category)
        if date_from:
            query = query.filter(Transaction.transaction_date >= date_from)
        if date_to:
            query = query.filter(Transaction.transaction_date <= date_to)
        return query.order_by(
            Transaction.transaction_date.desc(), Transaction.created_at.desc(), Transaction.id.desc()
        )

    def list_transactions(
        self, user_id: int, *, page: int = 1, per_page: int = 50, **filters: Any
    ) -> Tuple[List[Transaction], int]:
        query = self.query_for_user(user_id, **filters)
        total = query.count()
        items = query.offset((page - 1) * per_page).limit(per_page).all()
        return items, total


__all__ = ["TransactionRepository", "UPDATABLE_FIELDS"]
