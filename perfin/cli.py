"""Flask CLI commands.

Usage:
    flask seed-owner --password secret123        # create or reset the owner login
    flask reconcile                              # report balance drift for every account
    flask reconcile --account 3
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext


@click.command("seed-owner")
@click.option("--email", default=None, help="Owner email (defaults to OWNER_EMAIL)")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--full-name", default=None)
@with_appcontext
def seed_owner_command(email: str | None, password: str, full_name: str | None):
    """Create the single owner account, or reset its password."""
    from perfin.core.users.services import ensure_owner

    try:
        user = ensure_owner(email or current_app.config["OWNER_EMAIL"], password, full_name)
    except ValueError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Owner ready: {user.email} (id={user.id})")


@click.command("reconcile")
@click.option("--email", default=None, help="Owner email (defaults to OWNER_EMAIL)")
@click.option("--account", "account_id", type=int, default=None, help="Check a single account id")
@with_appcontext
def reconcile_command(email: str | None, account_id: int | None):
    """Compare stored balances with their transaction history. Reports only; never repairs."""
    from perfin.core.users.services import get_user_by_email
    from perfin.domains.finance.errors import NotFoundError
    from perfin.domains.finance.services.ledger_service import reconcile_account, reconcile_all

    owner = get_user_by_email(email or current_app.config["OWNER_EMAIL"])
    if owner is None:
        raise click.ClickException("Owner not found; run `flask seed-owner` first.")

    try:
        results = [reconcile_account(owner.id, account_id)] if account_id else reconcile_all(owner.id)
    except NotFoundError as exc:
        raise click.ClickException(str(exc))

    drifted = 0
    for result in results:
        if result.consistent:
            click.echo(f"  ✓ account {result.account_id}: {result.stored_balance}")
        else:
            drifted += 1
            click.echo(
                f"  ✗ account {result.account_id}: stored {result.stored_balance}, "
                f"expected {result.expected_balance} (drift {result.drift})"
            )
    click.echo(f"{len(results)} account(s) checked, {drifted} with drift")
    if drifted:
        raise SystemExit(1)


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(seed_owner_command)
    app.cli.add_command(reconcile_command)
