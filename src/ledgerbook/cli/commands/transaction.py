"""Transaction management commands."""

from dataclasses import replace

import click
from ledgerbook.cli.account_resolution import resolve_account_name_or_exit
from ledgerbook.cli.date_filters import parse_date_or_exit, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import commit, get_snapshot
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import SourceKind, TransactionKind
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import format_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (DD/MM/YYYY, YYYY-MM-DD or 'today')")
@click.option("--end-date", help="End date (DD/MM/YYYY, YYYY-MM-DD or 'today')")
@click.option("--this-month", is_flag=True, help="Only this month")
@click.option("--this-year", is_flag=True, help="Only this year")
@click.option("--this-week", is_flag=True, help="Only this week")
@click.option("--last-month", is_flag=True, help="Only last month")
@click.option("--last-year", is_flag=True, help="Only last year")
@click.option("--account", help="Account name or ID")
@click.option("--type", "kind", type=click.Choice([k.value for k in TransactionKind]), help="Revenue or expense")
@click.option("--category", help="Category name")
@click.option("--verbose", "-v", is_flag=True, help="Show all fields including observation, supplier and origin")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    this_week: bool,
    last_month: bool,
    last_year: bool,
    account: str | None,
    kind: str | None,
    category: str | None,
    verbose: bool,
):
    """View transactions with optional filters, most recent first."""
    snapshot = get_snapshot(ctx)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "this-week": this_week,
            "last-month": last_month,
            "last-year": last_year,
        },
    )

    account_name = None
    if account:
        account_name = resolve_account_name_or_exit(ctx, AccountService(snapshot), account)

    transactions = TransactionService(snapshot).list_transactions(
        start_date=start,
        end_date=end,
        account=account_name,
        kind=TransactionKind(kind) if kind else None,
        category=category,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 100)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Type: {txn.kind.value}")
            click.echo(f"  Date: {format_date(txn.date)}")
            click.echo(f"  Amount: R$ {txn.amount:,.2f}")
            click.echo(f"  Account: {txn.account}")
            click.echo(f"  Category: {txn.category}")
            click.echo(f"  Description: {txn.description}")
            if txn.observation:
                click.echo(f"  Observation: {txn.observation}")
            if txn.supplier:
                click.echo(f"  Supplier: {txn.supplier}")
            if txn.doc_number:
                click.echo(f"  Document: {txn.doc_number}")
            if txn.source.kind is not SourceKind.MANUAL:
                click.echo(f"  Origin: {txn.source.kind.value}")
            click.echo("-" * 100)
    else:
        click.echo("-" * 110)
        click.echo(
            f"{'Date':<12} {'Amount':>14} {'Account':<24} {'Category':<26} {'Description':<30}"
        )
        click.echo("-" * 110)
        for txn in transactions:
            click.echo(
                f"{format_date(txn.date):<12} {txn.signed_amount:>14,.2f} {txn.account[:24]:<24} "
                f"{txn.category[:26]:<26} {txn.description[:30]:<30}"
            )

    total_revenue = sum(t.amount for t in transactions if t.kind is TransactionKind.REVENUE)
    total_expense = sum(t.amount for t in transactions if t.kind is TransactionKind.EXPENSE)
    click.echo("-" * 110)
    click.echo(
        f"TOTAL  Revenue: R$ {total_revenue:,.2f} | Expenses: R$ {total_expense:,.2f} | "
        f"Count: {len(transactions)}"
    )


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--account", help="Account name or ID")
@click.option("--date", help="Transaction date (DD/MM/YYYY, YYYY-MM-DD or 'today')")
@click.option("--amount", help="Transaction amount, always positive")
@click.option("--description", help="Transaction description")
@click.option("--category", help="Category name")
@click.option("--observation", help="Observation")
@click.option("--supplier", help="Supplier")
@click.option("--doc-number", help="Document number")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    account: str | None,
    date: str | None,
    amount: str | None,
    description: str | None,
    category: str | None,
    observation: str | None,
    supplier: str | None,
    doc_number: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        ledgerbook transaction update trans-1a2b --amount 75,00
        ledgerbook transaction update trans-1a2b --account "Cofre" --category "Fornecedores"
    """
    snapshot = get_snapshot(ctx)
    service = TransactionService(snapshot)

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    changes = {}
    if account is not None:
        changes["account"] = resolve_account_name_or_exit(ctx, AccountService(snapshot), account)
    if date is not None:
        changes["date"] = parse_date_or_exit(ctx, date)
    if amount is not None:
        try:
            changes["amount"] = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)
    for field_name, value in (
        ("description", description),
        ("category", category),
        ("observation", observation),
        ("supplier", supplier),
        ("doc_number", doc_number),
    ):
        if value is not None:
            changes[field_name] = value

    try:
        change = service.update_transaction(replace(txn, **changes))
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, change.snapshot)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.pass_context
def delete_transaction(ctx, transaction_id: str) -> None:
    """Delete a transaction.

    Examples:
        ledgerbook transaction delete trans-1a2b
    """
    service = TransactionService(get_snapshot(ctx))

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if txn.source.kind is SourceKind.SALES_LAUNCH:
        click.echo(
            "Warning: this posting belongs to a sales launch; use 'sales retract' "
            "to remove the whole day.",
            err=True,
        )

    # Confirm deletion
    if not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    commit(ctx, service.delete_transaction(transaction_id).snapshot)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
