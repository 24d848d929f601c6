"""Schema guardrails for the initial ledger migration."""

from __future__ import annotations

import pytest
import sqlalchemy as sa
from flask_migrate import downgrade, upgrade
from sqlalchemy.exc import IntegrityError

from perfin import create_app
from perfin.extensions import db

pytestmark = pytest.mark.integration

LEDGER_TABLES = {"user", "finance_account", "finance_transaction", "finance_category", "finance_lending_record"}


@pytest.fixture()
def migrated_app():
    """App whose schema comes from Alembic instead of ``create_all``."""
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    upgrade()
    try:
        yield app
    finally:
        db.session.remove()
        ctx.pop()


def test_upgrade_creates_ledger_tables(migrated_app):
    inspector = sa.inspect(db.engine)
    assert LEDGER_TABLES <= set(inspector.get_table_names())

    columns = {c["name"] for c in inspector.get_columns("finance_account")}
    assert {"balance", "opening_balance", "currency"} <= columns

    constraints = {c["name"] for c in inspector.get_unique_constraints("finance_account")}
    assert "uq_finance_account_user_name" in constraints


def test_transaction_amount_must_be_positive(migrated_app):
    db.session.execute(sa.text("INSERT INTO \"user\" (email, password_hash) VALUES ('a@example.com', 'x')"))
    db.session.execute(
        sa.text("INSERT INTO finance_account (user_id, name, account_type) VALUES (1, 'Cash', 'cash')")
    )
    insert_txn = sa.text(
        """
        INSERT INTO finance_transaction
            (user_id, account_id, amount, direction, description, category, transaction_date)
        VALUES (1, 1, :amount, 'expense', 'Tea', 'Food', '2024-01-01')
        """
    )
    db.session.execute(insert_txn, {"amount": 5})

    with db.session.begin_nested():
        with pytest.raises(IntegrityError):
            db.session.execute(insert_txn, {"amount": 0})
            db.session.flush()


def test_downgrade_removes_ledger_tables(migrated_app):
    downgrade(revision="base")
    assert not LEDGER_TABLES & set(sa.inspect(db.engine).get_table_names())
