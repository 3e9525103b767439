"""Recurring transaction commands."""

from dataclasses import replace

import click
from ledgerbook.cli.account_resolution import resolve_account_name_or_exit
from ledgerbook.cli.date_filters import parse_date_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import commit, get_snapshot
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import ChangeStatus, Frequency, TransactionKind
from ledgerbook.domain.recurrence import RecurringService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import days_until, format_date

FREQUENCIES = [f.value for f in Frequency]


@click.group()
def recurring_group():
    """Manage recurring bills and incomes."""
    pass


@recurring_group.command("create")
@click.option("--type", "kind", type=click.Choice([k.value for k in TransactionKind]), default="expense", show_default=True)
@click.option("--description", required=True, help="Description of every generated posting")
@click.option("--category", required=True, help="Category name")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--amount", required=True, help="Amount of each occurrence")
@click.option("--frequency", type=click.Choice(FREQUENCIES), default="monthly", show_default=True)
@click.option("--start-date", required=True, help="First due date")
@click.option("--end-date", help="Last possible due date")
@click.option("--observation", default="")
@click.option("--supplier", default="")
@click.option("--doc-number", default="")
@click.pass_context
def create_recurring(
    ctx,
    kind: str,
    description: str,
    category: str,
    account: str,
    amount: str,
    frequency: str,
    start_date: str,
    end_date: str | None,
    observation: str,
    supplier: str,
    doc_number: str,
):
    """Create a recurring transaction.

    Occurrences that are already due are posted right away.

    Examples:
        ledgerbook recurring create --description "Aluguel" --category "Despesas Fixas" --account "Banco do Brasil" --amount 2500 --start-date 05/01/2024
    """
    snapshot = get_snapshot(ctx)
    account_name = resolve_account_name_or_exit(ctx, AccountService(snapshot), account)
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    try:
        snapshot, recurring = RecurringService(snapshot).create(
            kind=TransactionKind(kind),
            description=description,
            category=category,
            account=account_name,
            amount=parse_amount(amount),
            frequency=Frequency(frequency),
            start_date=start,
            end_date=end,
            observation=observation,
            supplier=supplier,
            doc_number=doc_number,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    change = RecurringService(snapshot).rollforward()
    commit(ctx, change.snapshot)
    click.echo(f"Created recurring transaction {recurring.id} ({frequency})")
    if change.added:
        click.echo(f"Posted {len(change.added)} occurrence(s) already due")


@recurring_group.command("list")
@click.pass_context
def list_recurring(ctx):
    """List recurring transactions."""
    items = RecurringService(get_snapshot(ctx)).list_recurring()
    if not items:
        click.echo("No recurring transactions found.")
        return

    click.echo("\nRecurring transactions:")
    click.echo("-" * 110)
    for r in items:
        end = format_date(r.end_date) if r.end_date else "-"
        click.echo(
            f"{r.id:<38} {r.kind.value:<8} {r.description[:24]:<24} R$ {r.amount:>10,.2f} "
            f"{r.frequency.value:<8} next {format_date(r.next_due_date)} end {end}"
        )


@recurring_group.command("edit")
@click.argument("recurring_id")
@click.option("--description")
@click.option("--category")
@click.option("--account", help="Account name or ID")
@click.option("--amount")
@click.option("--frequency", type=click.Choice(FREQUENCIES))
@click.option("--start-date")
@click.option("--end-date", help="Last due date, or empty string to clear")
@click.pass_context
def edit_recurring(
    ctx,
    recurring_id: str,
    description: str | None,
    category: str | None,
    account: str | None,
    amount: str | None,
    frequency: str | None,
    start_date: str | None,
    end_date: str | None,
):
    """Edit a recurring transaction. Only the given fields change."""
    snapshot = get_snapshot(ctx)
    service = RecurringService(snapshot)

    try:
        recurring = service.require(recurring_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    changes = {}
    if description is not None:
        changes["description"] = description
    if category is not None:
        changes["category"] = category
    if account is not None:
        changes["account"] = resolve_account_name_or_exit(ctx, AccountService(snapshot), account)
    if frequency is not None:
        changes["frequency"] = Frequency(frequency)
    if start_date is not None:
        changes["start_date"] = parse_date_or_exit(ctx, start_date, "start date")
    if end_date is not None:
        changes["end_date"] = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    try:
        if amount is not None:
            changes["amount"] = parse_amount(amount)
        snapshot = service.update(replace(recurring, **changes))
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, RecurringService(snapshot).rollforward().snapshot)
    click.echo(f"Updated recurring transaction {recurring_id}")


@recurring_group.command("delete")
@click.argument("recurring_id")
@click.pass_context
def delete_recurring(ctx, recurring_id: str):
    """Delete a recurring transaction. Postings already made are kept."""
    try:
        snapshot = RecurringService(get_snapshot(ctx)).delete(recurring_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Deleted recurring transaction {recurring_id}")


@recurring_group.command("upcoming")
@click.option("--days", type=int, default=14, show_default=True, help="Look-ahead window")
@click.pass_context
def upcoming(ctx, days: int):
    """Show recurring transactions due soon that are not posted yet."""
    items = RecurringService(get_snapshot(ctx)).upcoming(window_days=days)
    if not items:
        click.echo(f"Nothing due in the next {days} days.")
        return

    for r in items:
        remaining = days_until(format_date(r.next_due_date))
        when = "today" if remaining == 0 else f"in {remaining} day(s)"
        click.echo(
            f"{format_date(r.next_due_date)} ({when}) {r.description} R$ {r.amount:,.2f} [{r.id}]"
        )


@recurring_group.command("launch")
@click.argument("recurring_id")
@click.pass_context
def launch_now(ctx, recurring_id: str):
    """Post the next occurrence now, ahead of its due date."""
    try:
        change = RecurringService(get_snapshot(ctx)).launch_now(recurring_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, change.snapshot)
    if change.status is ChangeStatus.ALREADY_POSTED:
        click.echo("Occurrence was already posted; moved to the next due date.")
        return
    posting = change.added[0]
    click.echo(f"Posted '{posting.description}' for {format_date(posting.date)}")


def register_commands(cli):
    """Register recurring commands with main CLI."""
    cli.add_command(recurring_group, name="recurring")
