"""initial schema for Perfin: owner, accounts, transactions, categories, lending

Revision ID: 0001_finance_ledger
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_finance_ledger"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255)),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "finance_account",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("account_type", sa.String(length=50), nullable=False),
        sa.Column("balance", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("opening_balance", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="INR"),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "name", name="uq_finance_account_user_name"),
    )
    op.create_index("ix_finance_account_user_id", "finance_account", ["user_id"])
    op.create_index("ix_finance_account_user_created_at", "finance_account", ["user_id", "created_at"])

    op.create_table(
        "finance_transaction",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "account_id",
            sa.Integer(),
            sa.ForeignKey("finance_account.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("direction", sa.String(length=16), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=255), nullable=False),
        sa.Column("transaction_date", sa.Date(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("amount > 0", name="ck_finance_transaction_amount_positive"),
        sa.CheckConstraint("direction IN ('income', 'expense')", name="ck_finance_transaction_direction"),
    )
    op.create_index("ix_finance_transaction_user_id", "finance_transaction", ["user_id"])
    op.create_index("ix_finance_transaction_account_id", "finance_transaction", ["account_id"])
    op.create_index("ix_finance_transaction_user_date", "finance_transaction", ["user_id", "transaction_date"])

    op.create_table(
        "finance_category",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "name", "type", name="uq_finance_category_user_name_type"),
    )
    op.create_index("ix_finance_category_user_id", "finance_category", ["user_id"])

    op.create_table(
        "finance_lending_record",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("person", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date()),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="outstanding"),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_finance_lending_record_user_id", "finance_lending_record", ["user_id"])
    op.create_index("ix_finance_lending_record_user_date", "finance_lending_record", ["user_id", "date"])


def downgrade():
    op.drop_table("finance_lending_record")
    op.drop_table("finance_category")
    op.drop_table("finance_transaction")
    op.drop_table("finance_account")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
