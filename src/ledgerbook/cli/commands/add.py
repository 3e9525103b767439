"""Add transaction command."""

import click
from ledgerbook.cli.account_resolution import resolve_account_name_or_exit
from ledgerbook.cli.date_filters import parse_date_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import commit, get_snapshot
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import TransactionKind
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import format_date


@click.command("add")
@click.option(
    "--type",
    "kind",
    type=click.Choice([k.value for k in TransactionKind]),
    required=True,
    help="Revenue or expense",
)
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--date",
    default="today",
    help="Transaction date (DD/MM/YYYY, YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Transaction amount, always positive (e.g., 123.45 or 123,45)")
@click.option("--description", required=True, help="Transaction description")
@click.option("--category", required=True, help="Category name")
@click.option("--observation", default="", help="Observation")
@click.option("--supplier", default="", help="Supplier")
@click.option("--doc-number", default="", help="Document number")
@click.pass_context
def add_transaction(
    ctx,
    kind: str,
    account: str,
    date: str,
    amount: str,
    description: str,
    category: str,
    observation: str,
    supplier: str,
    doc_number: str,
):
    """Add a transaction manually.

    Examples:
        ledgerbook add --type expense --account "Stone I.P" --amount 150 --description "Energia" --category "Despesas Fixas"
        ledgerbook add --type revenue --account "Caixa Físico" --date 05/02/2024 --amount "1.000,00" --description "Serviço" --category "Outras Receitas"
    """
    snapshot = get_snapshot(ctx)
    txn_kind = TransactionKind(kind)
    account_name = resolve_account_name_or_exit(ctx, AccountService(snapshot), account)
    txn_date = parse_date_or_exit(ctx, date)

    # Parse amount
    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    if category not in CategoryService(snapshot).list_categories(txn_kind):
        click.echo(f"Warning: '{category}' is not a known {kind} category", err=True)

    try:
        change = TransactionService(snapshot).create_transaction(
            kind=txn_kind,
            date=txn_date,
            description=description,
            category=category,
            account=account_name,
            amount=txn_amount,
            observation=observation,
            supplier=supplier,
            doc_number=doc_number,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, change.snapshot)
    txn = change.added[0]
    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Type: {txn.kind.value}")
    click.echo(f"  Account: {txn.account}")
    click.echo(f"  Date: {format_date(txn.date)}")
    click.echo(f"  Amount: R$ {txn.amount:,.2f}")
    click.echo(f"  Category: {txn.category}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
