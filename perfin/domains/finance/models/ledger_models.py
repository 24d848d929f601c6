"""Finance ledger models: accounts and the transactions that move their balance."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.orm import Mapped, mapped_column, relationship

from perfin.extensions import db

DIRECTION_INCOME = "income"
DIRECTION_EXPENSE = "expense"
DIRECTIONS = (DIRECTION_INCOME, DIRECTION_EXPENSE)


class Account(db.Model):
    __tablename__ = "finance_account"
    __table_args__ = (
        db.UniqueConstraint("user_id", "name", name="uq_finance_account_user_name"),
        db.Index("ix_finance_account_user_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    account_type: Mapped[str] = mapped_column(db.String(50), nullable=False)
    # Examples: 'checking', 'savings', 'cash', 'credit_card', 'investment'

    balance: Mapped[Decimal] = mapped_column(db.Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    # Cached: opening_balance + signed sum of transactions. Only the ledger service moves it.

    opening_balance: Mapped[Decimal] = mapped_column(db.Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    # Seed value plus administrative edits; the part of balance no transaction explains.

    currency: Mapped[str] = mapped_column(db.String(10), nullable=False, default="INR")
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction", back_populates="account", cascade="all, delete-orphan"
    )


class Transaction(db.Model):
    __tablename__ = "finance_transaction"
    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_finance_transaction_amount_positive"),
        db.CheckConstraint("direction IN ('income', 'expense')", name="ck_finance_transaction_direction"),
        db.Index("ix_finance_transaction_user_date", "user_id", "transaction_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    account_id: Mapped[int] = mapped_column(
        db.ForeignKey("finance_account.id", ondelete="CASCADE"), index=True, nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(db.Numeric(15, 2), nullable=False)
    direction: Mapped[str] = mapped_column(db.String(16), nullable=False)
    description: Mapped[str] = mapped_column(db.Text, nullable=False)
    category: Mapped[str] = mapped_column(db.String(255), nullable=False)
    transaction_date: Mapped[date] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    account: Mapped[Account] = relationship("Account", back_populates="transactions")
