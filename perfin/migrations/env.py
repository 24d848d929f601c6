"""Alembic environment for Perfin.

Runs inside the Flask app context when invoked through Flask-Migrate
(``flask db upgrade``); otherwise builds an app from ``APP_ENV``.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from flask import has_app_context

from perfin.extensions import db

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

if config.config_file_name:
    try:
        fileConfig(config.config_file_name, disable_existing_loggers=False)
    except Exception:
        # Proceed without logging config if the ini is missing or incomplete
        pass

# Import models so their tables are registered on the metadata.
import perfin.core.users.models  # noqa: E402,F401
import perfin.domains.finance.models.category_models  # noqa: E402,F401
import perfin.domains.finance.models.ledger_models  # noqa: E402,F401
import perfin.domains.finance.models.lending_models  # noqa: E402,F401

target_metadata = db.metadata


def _engine():
    if has_app_context():
        return db.engine
    from perfin import create_app

    with create_app().app_context():
        return db.engine


def run_migrations_offline() -> None:
    context.configure(
        url=_engine().url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with _engine().connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
