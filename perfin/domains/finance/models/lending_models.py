"""Lending/borrowing tracker models."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy.orm import Mapped, mapped_column

from perfin.extensions import db

LENDING_TYPES = ("lent", "borrowed")
LENDING_STATUSES = ("outstanding", "paid", "overdue")


class LendingRecord(db.Model):
    __tablename__ = "finance_lending_record"
    __table_args__ = (db.Index("ix_finance_lending_record_user_date", "user_id", "date"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    type: Mapped[str] = mapped_column(db.String(20), nullable=False)
    # Values: 'lent' (they owe the owner), 'borrowed' (the owner owes them)
    person: Mapped[str] = mapped_column(db.String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(db.Numeric(15, 2), nullable=False)
    date: Mapped[dt.date] = mapped_column(nullable=False)
    due_date: Mapped[dt.date | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(db.String(20), nullable=False, default="outstanding")
    notes: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow, nullable=False)
