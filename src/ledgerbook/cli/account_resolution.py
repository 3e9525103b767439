"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import NotFoundError
from ledgerbook.utils.account_resolver import resolve_account


def resolve_account_name_or_exit(
    ctx: click.Context, account_service: AccountService, account: str
) -> str:
    """Resolve an account ID or name to the account name postings use.

    Exits with a CLI error when the account does not exist.
    """
    try:
        return resolve_account(account_service, account).name
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
