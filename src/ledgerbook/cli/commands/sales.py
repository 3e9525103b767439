"""Daily sales commands."""

from datetime import date

import click
from ledgerbook.cli.date_filters import parse_date_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import commit, get_snapshot
from ledgerbook.domain.entities import SALES_CHANNELS, ChangeStatus, SalesRecord
from ledgerbook.domain.sales import SalesService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import format_date

CHANNEL_LABELS = {
    "cash": "Dinheiro",
    "pix_manual": "Pix Manual",
    "pix_qr_code": "Pix QR Code",
    "credit_mastercard": "Crédito Master",
    "credit_visa": "Crédito Visa",
    "credit_elo": "Crédito Elo",
    "debit_mastercard": "Débito Master",
    "debit_visa": "Débito Visa",
    "debit_elo": "Débito Elo",
}


@click.group()
def sales_group():
    """Record daily sales and post them to the ledger."""
    pass


def _require_day(ctx, service: SalesService, date_str: str) -> SalesRecord:
    """Find the sales record of a date, or exit with a CLI error."""
    sales_date = parse_date_or_exit(ctx, date_str)
    sale = service.find_by_date(sales_date)
    if sale is None:
        click.echo(
            f"Error: No sales record for {format_date(sales_date)}; "
            "create the week first with 'sales week'",
            err=True,
        )
        ctx.exit(1)
    return sale


@sales_group.command("week")
@click.argument("date_str", metavar="DATE", default="today")
@click.pass_context
def create_week(ctx, date_str: str):
    """Create empty sales records for the week (Monday to Sunday) of DATE.

    Examples:
        ledgerbook sales week
        ledgerbook sales week 12/02/2024
    """
    any_date = parse_date_or_exit(ctx, date_str)
    try:
        snapshot, records = SalesService(get_snapshot(ctx)).create_week(any_date)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(
        f"Created sales week {format_date(records[0].date)} - {format_date(records[-1].date)}"
    )


@sales_group.command("show")
@click.argument("date_str", metavar="DATE", default="today")
@click.pass_context
def show_week(ctx, date_str: str):
    """Show the sales of the week containing DATE."""
    any_date = parse_date_or_exit(ctx, date_str)
    service = SalesService(get_snapshot(ctx))
    records = service.week(any_date)
    if not records:
        click.echo("No sales records for that week.")
        return

    launched = service.launched_dates()
    click.echo(f"\n{'Date':<12} {'Day':<14} {'Total':>14}  Launched")
    click.echo("-" * 52)
    for record in records:
        mark = "yes" if record.date in launched else "-"
        click.echo(
            f"{format_date(record.date):<12} {record.day_of_week:<14} "
            f"{record.total:>14,.2f}  {mark}"
        )

    totals = service.totals(records)
    click.echo("-" * 52)
    click.echo(f"{'Week total':<27} {totals.total:>14,.2f}")


@sales_group.command("day")
@click.argument("date_str", metavar="DATE")
@click.pass_context
def show_day(ctx, date_str: str):
    """Show every channel of one day with its fee and investment."""
    service = SalesService(get_snapshot(ctx))
    sale = _require_day(ctx, service, date_str)
    totals = service.day_totals(sale.id)

    click.echo(f"\n{format_date(sale.date)} ({sale.day_of_week})")
    for name in SALES_CHANNELS:
        click.echo(f"  {CHANNEL_LABELS[name]:<16} R$ {sale.channel(name):>12,.2f}")
    click.echo(f"  {'Total':<16} R$ {totals.total:>12,.2f}")
    click.echo(f"  {'Fees':<16} R$ {totals.fee:>12,.2f}")
    click.echo(f"  {'Investment':<16} R$ {totals.investment:>12,.2f}")
    if service.is_launched(sale.date):
        click.echo("  Launched to the ledger")


@sales_group.command("set")
@click.argument("date_str", metavar="DATE")
@click.argument("channel", type=click.Choice(SALES_CHANNELS))
@click.argument("amount")
@click.pass_context
def set_channel(ctx, date_str: str, channel: str, amount: str):
    """Set the amount sold through one channel on DATE.

    A launched day keeps its postings until it is relaunched.

    Examples:
        ledgerbook sales set 12/02/2024 cash 350
        ledgerbook sales set today credit_visa "1.234,50"
    """
    service = SalesService(get_snapshot(ctx))
    sale = _require_day(ctx, service, date_str)

    try:
        snapshot = service.update_sale(sale.id, channel, parse_amount(amount))
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Set {CHANNEL_LABELS[channel]} of {format_date(sale.date)}")
    if service.is_launched(sale.date):
        click.echo("Warning: this day is already launched; run 'sales relaunch' to update the ledger", err=True)


@sales_group.command("launch")
@click.argument("date_str", metavar="DATE")
@click.pass_context
def launch(ctx, date_str: str):
    """Post the sales of DATE to the ledger."""
    service = SalesService(get_snapshot(ctx))
    sale = _require_day(ctx, service, date_str)

    try:
        change = service.launch(sale.id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if change.status is ChangeStatus.ALREADY_POSTED:
        click.echo(f"Sales of {format_date(sale.date)} are already launched.")
        return

    commit(ctx, change.snapshot)
    click.echo(f"Launched sales of {format_date(sale.date)}:")
    _echo_postings(change.added)


@sales_group.command("retract")
@click.argument("date_str", metavar="DATE")
@click.pass_context
def retract(ctx, date_str: str):
    """Remove the ledger postings of the sales of DATE."""
    service = SalesService(get_snapshot(ctx))
    sale = _require_day(ctx, service, date_str)
    change = service.retract(sale.id)

    if change.status is ChangeStatus.NOTHING_TO_RETRACT:
        click.echo(f"Sales of {format_date(sale.date)} were not launched.")
        return

    commit(ctx, change.snapshot)
    click.echo(f"Retracted {len(change.removed)} posting(s) of {format_date(sale.date)}")


@sales_group.command("relaunch")
@click.argument("date_str", metavar="DATE")
@click.pass_context
def relaunch(ctx, date_str: str):
    """Replace the postings of DATE with ones built from the current figures."""
    service = SalesService(get_snapshot(ctx))
    sale = _require_day(ctx, service, date_str)

    try:
        change = service.relaunch(sale.id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, change.snapshot)
    click.echo(
        f"Relaunched sales of {format_date(sale.date)} "
        f"({len(change.removed)} removed, {len(change.added)} added):"
    )
    _echo_postings(change.added)


@sales_group.command("totals")
@click.argument("date_str", metavar="DATE", default="today")
@click.pass_context
def week_totals(ctx, date_str: str):
    """Show week totals per payment method for the week of DATE."""
    any_date: date = parse_date_or_exit(ctx, date_str)
    service = SalesService(get_snapshot(ctx))
    records = service.week(any_date)
    if not records:
        click.echo("No sales records for that week.")
        return

    totals = service.totals(records)
    breakdown = service.payment_breakdown(records)
    click.echo(f"\nWeek of {format_date(records[0].date)}")
    click.echo("-" * 40)
    click.echo(f"{'Cash':<20} R$ {breakdown.cash:>12,.2f}")
    click.echo(f"{'Pix':<20} R$ {breakdown.pix:>12,.2f}")
    click.echo(f"{'Credit':<20} R$ {breakdown.credit:>12,.2f}")
    click.echo(f"{'Debit':<20} R$ {breakdown.debit:>12,.2f}")
    click.echo("-" * 40)
    click.echo(f"{'Total':<20} R$ {totals.total:>12,.2f}")
    click.echo(f"{'Fees':<20} R$ {totals.fee:>12,.2f}")
    click.echo(f"{'Investment':<20} R$ {totals.investment:>12,.2f}")


def _echo_postings(postings) -> None:
    for txn in postings:
        click.echo(
            f"  {txn.kind.value:<8} {txn.account:<26} R$ {txn.amount:>12,.2f}  {txn.description}"
        )


def register_commands(cli):
    """Register sales commands with main CLI."""
    cli.add_command(sales_group, name="sales")
