"""Account management commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_name_or_exit
from ledgerbook.cli.date_filters import parse_date_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import commit, get_snapshot
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.adjustment import AdjustmentService
from ledgerbook.domain.entities import ChangeStatus
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.transfer import TransferService
from ledgerbook.utils.account_resolver import resolve_account
from ledgerbook.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage accounts, transfers and balance adjustments."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--initial-balance", default="0", help="Opening balance (default 0)")
@click.pass_context
def create_account(ctx, name: str, initial_balance: str):
    """Create a new account.

    Examples:
        ledgerbook account create "Caixa Loja 2"
        ledgerbook account create "Nubank" --initial-balance "1.500,00"
    """
    service = AccountService(get_snapshot(ctx))

    try:
        balance = parse_amount(initial_balance)
        snapshot, account = service.create_account(name=name, initial_balance=balance)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Created account '{account.name}' (ID: {account.id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their current balance."""
    service = AccountService(get_snapshot(ctx))

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    balances = service.balances()
    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:<10} | {acc.name:28s} | Balance: R$ {balances[acc.name]:>12,.2f}"
        )
    click.echo("-" * 70)
    click.echo(f"{'Total':>45} R$ {sum(balances.values()):>12,.2f}")


@account_group.command("edit")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--initial-balance", help="New opening balance")
@click.pass_context
def edit_account(ctx, account: str, name: str | None, initial_balance: str | None) -> None:
    """Rename an account or change its opening balance.

    ACCOUNT can be an account name or ID. Postings follow a renamed account.

    Examples:
        ledgerbook account edit "Cofre" --name "Cofre Loja"
        ledgerbook account edit acc-3 --initial-balance 250
    """
    if name is None and initial_balance is None:
        click.echo("Error: Nothing to change; use --name or --initial-balance", err=True)
        ctx.exit(1)

    service = AccountService(get_snapshot(ctx))
    try:
        account_obj = resolve_account(service, account)
        balance = parse_amount(initial_balance) if initial_balance is not None else None
        snapshot = service.edit_account(account_obj.id, name=name, initial_balance=balance)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Updated account '{name or account_obj.name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def delete_account(ctx, account: str) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID. Postings that refer to the account
    are kept but no longer count towards any balance.

    Examples:
        ledgerbook account delete "PagBank"
    """
    service = AccountService(get_snapshot(ctx))
    try:
        account_obj = resolve_account(service, account)
    except DomainError as e:
        handle_domain_error(ctx, e)

    # Confirm deletion
    if not click.confirm(f"Are you sure you want to delete account '{account_obj.name}'?"):
        click.echo("Deletion cancelled.")
        return

    commit(ctx, service.delete_account(account_obj.id))
    click.echo(f"Deleted account '{account_obj.name}'")


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_balance(ctx, account: str) -> None:
    """Show the current balance of one account."""
    service = AccountService(get_snapshot(ctx))
    name = resolve_account_name_or_exit(ctx, service, account)
    click.echo(f"{name}: R$ {service.balances()[name]:,.2f}")


@account_group.command("transfer")
@click.argument("source", metavar="FROM_ACCOUNT")
@click.argument("destination", metavar="TO_ACCOUNT")
@click.argument("amount")
@click.option("--date", "date_str", default="today", help="Transfer date (DD/MM/YYYY, YYYY-MM-DD or 'today')")
@click.option("--description", help="Description (derived from the account names if omitted)")
@click.pass_context
def transfer(ctx, source: str, destination: str, amount: str, date_str: str, description: str | None):
    """Move money from one account to another.

    Examples:
        ledgerbook account transfer "Caixa Físico" "Cofre" 500
        ledgerbook account transfer "Stone I.P" "Banco do Brasil" "1.200,00" --date 05/02/2024
    """
    snapshot = get_snapshot(ctx)
    accounts = AccountService(snapshot)
    source_name = resolve_account_name_or_exit(ctx, accounts, source)
    destination_name = resolve_account_name_or_exit(ctx, accounts, destination)
    transfer_date = parse_date_or_exit(ctx, date_str)

    try:
        change = TransferService(snapshot).transfer(
            source_name,
            destination_name,
            parse_amount(amount),
            transfer_date,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, change.snapshot)
    click.echo(
        f"Transferred R$ {change.added[0].amount:,.2f} from '{source_name}' to '{destination_name}'"
    )


@account_group.command("adjust")
@click.argument("account", metavar="ACCOUNT")
@click.argument("balance")
@click.option("--observation", help="Note stored on the adjustment posting")
@click.pass_context
def adjust(ctx, account: str, balance: str, observation: str | None):
    """Set an account to the balance actually counted.

    A single revenue or expense posting dated today covers the difference.

    Examples:
        ledgerbook account adjust "Cofre" "1.250,00"
    """
    snapshot = get_snapshot(ctx)
    name = resolve_account_name_or_exit(ctx, AccountService(snapshot), account)

    try:
        change = AdjustmentService(snapshot).adjust(
            name, parse_amount(balance), observation=observation
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if change.status is ChangeStatus.NOTHING_TO_ADJUST:
        click.echo(f"Nothing to adjust: '{name}' already has that balance.")
        return

    commit(ctx, change.snapshot)
    posting = change.added[0]
    click.echo(f"Adjusted '{name}' by {posting.signed_amount:+,.2f} ({posting.category})")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
