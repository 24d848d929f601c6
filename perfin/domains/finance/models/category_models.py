"""Transaction category suggestions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from perfin.extensions import db

CATEGORY_TYPES = ("income", "expense")


class Category(db.Model):
    __tablename__ = "finance_category"
    __table_args__ = (
        db.UniqueConstraint("user_id", "name", "type", name="uq_finance_category_user_name_type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    type: Mapped[str] = mapped_column(db.String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
