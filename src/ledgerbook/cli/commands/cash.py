"""Cash count sheet commands."""

import click
from ledgerbook.cli.date_filters import parse_date_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import commit, get_snapshot
from ledgerbook.domain.cash_count import CashCountService
from ledgerbook.domain.entities import CashItemKind, Count, Unset
from ledgerbook.utils.amount_parser import parse_amount

# Typed in place of a quantity to clear a row
UNSET_INPUT = "##"


@click.group()
def cash_group():
    """Count banknotes and balances, and keep a history of counts."""
    pass


@cash_group.command("show")
@click.pass_context
def show_sheet(ctx):
    """Show the current cash count sheet."""
    service = CashCountService(get_snapshot(ctx))
    click.echo("\nCash count:")
    click.echo("-" * 60)
    for item in service.snapshot.cash_count:
        if isinstance(item.quantity, Unset):
            quantity = UNSET_INPUT
        elif item.kind is CashItemKind.BALANCE:
            quantity = f"{item.quantity.value:,.2f}"
        else:
            quantity = str(item.quantity.value)
        click.echo(f"[{item.id:>2}] {item.label:<24} {quantity:>12}  R$ {item.subtotal:>12,.2f}")

    summary = service.summary()
    click.echo("-" * 60)
    click.echo(f"{'Physical cash':<40} R$ {summary.physical_cash:>12,.2f}")
    click.echo(f"{'Account balances':<40} R$ {summary.account_balances:>12,.2f}")
    click.echo(f"{'Grand total':<40} R$ {summary.grand_total:>12,.2f}")


@cash_group.command("set")
@click.argument("item_id")
@click.argument("quantity")
@click.pass_context
def set_quantity(ctx, item_id: str, quantity: str):
    """Set the note count or balance of a row; '##' clears it.

    Examples:
        ledgerbook cash set 3 12
        ledgerbook cash set 8 "1.530,25"
        ledgerbook cash set 9 "##"
    """
    try:
        value = Unset() if quantity.strip() == UNSET_INPUT else Count(parse_amount(quantity))
        snapshot = CashCountService(get_snapshot(ctx)).set_quantity(item_id, value)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Set row {item_id}")


@cash_group.command("add")
@click.argument("item_id")
@click.argument("amount")
@click.pass_context
def add_quantity(ctx, item_id: str, amount: str):
    """Add notes (or an amount) to a row."""
    try:
        snapshot = CashCountService(get_snapshot(ctx)).add_quantity(item_id, parse_amount(amount))
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Added {amount} to row {item_id}")


@cash_group.command("save")
@click.option("--observation", default="", help="Note stored with the count")
@click.pass_context
def save_count(ctx, observation: str):
    """Save the current sheet to the history and start a new one."""
    snapshot, entry = CashCountService(get_snapshot(ctx)).save_history(observation)
    commit(ctx, snapshot)
    click.echo(f"Saved cash count {entry.id}: R$ {entry.total_value:,.2f}")


@cash_group.command("reset")
@click.pass_context
def reset_sheet(ctx):
    """Clear the current sheet without saving it."""
    commit(ctx, CashCountService(get_snapshot(ctx)).reset())
    click.echo("Cash count cleared.")


@cash_group.command("history")
@click.option("--search", help="Text contained in the observation")
@click.option("--start-date")
@click.option("--end-date")
@click.pass_context
def show_history(ctx, search: str | None, start_date: str | None, end_date: str | None):
    """List saved counts, most recent first."""
    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None
    entries = CashCountService(get_snapshot(ctx)).filter_history(search, start, end)
    if not entries:
        click.echo("No saved counts found.")
        return

    for entry in entries:
        click.echo(
            f"{entry.id:<40} {entry.timestamp:%d/%m/%Y %H:%M} "
            f"R$ {entry.total_value:>12,.2f}  {entry.observation}"
        )


@cash_group.command("load")
@click.argument("entry_id")
@click.pass_context
def load_history(ctx, entry_id: str):
    """Copy a saved count back into the current sheet."""
    try:
        snapshot = CashCountService(get_snapshot(ctx)).load_history(entry_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Loaded cash count {entry_id}")


@cash_group.command("delete-history")
@click.argument("entry_id")
@click.pass_context
def delete_history(ctx, entry_id: str):
    """Delete a saved count."""
    try:
        snapshot = CashCountService(get_snapshot(ctx)).delete_history(entry_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Deleted cash count {entry_id}")


def register_commands(cli):
    """Register cash count commands with main CLI."""
    cli.add_command(cash_group, name="cash")
