"""Main CLI entry point."""

import logging

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import open_snapshot, save_if_dirty
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.date_parser import today_utc

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    account,
    add,
    cash,
    category,
    fees,
    inventory,
    payroll,
    recurring,
    sales,
    summary,
    transaction,
)


def configure_logging(verbose: int) -> None:
    """Send log records to stderr; -v shows INFO, -vv shows DEBUG."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option("-v", "--verbose", count=True, help="Show engine activity (-vv for debug)")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: int):
    """Ledgerbook - Small business bookkeeping.

    Record daily sales, recurring bills and one-off transactions; balances,
    acquirer fees, investments and payroll are derived automatically.
    Recurring transactions that fell due are posted every time a command
    runs.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Open the ledger only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        try:
            snapshot, dirty = open_snapshot(db, today_utc())
        except DomainError as e:
            db.disconnect()
            handle_domain_error(ctx, DomainError(f"Stored data could not be read: {e}"))
        ctx.obj["db"] = db
        ctx.obj["snapshot"] = snapshot
        ctx.obj["dirty"] = dirty
        ctx.call_on_close(lambda: save_if_dirty(ctx))


# Register all commands
account.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
recurring.register_commands(cli)
sales.register_commands(cli)
fees.register_commands(cli)
category.register_commands(cli)
payroll.register_commands(cli)
inventory.register_commands(cli)
cash.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
