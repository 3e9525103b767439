"""Category management commands."""

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import commit, get_snapshot
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import TransactionKind

KIND_CHOICE = click.Choice([k.value for k in TransactionKind])


@click.group()
def category_group():
    """Manage revenue and expense categories."""
    pass


@category_group.command("list")
@click.option("--type", "kind", type=KIND_CHOICE, help="Only one kind")
@click.pass_context
def list_categories(ctx, kind: str | None):
    """List categories."""
    service = CategoryService(get_snapshot(ctx))
    kinds = [TransactionKind(kind)] if kind else list(TransactionKind)

    for txn_kind in kinds:
        click.echo(f"\n{txn_kind.value.capitalize()} categories:")
        names = service.list_categories(txn_kind)
        if not names:
            click.echo("  (none)")
        for name in names:
            click.echo(f"  {name}")


@category_group.command("add")
@click.argument("name")
@click.option("--type", "kind", type=KIND_CHOICE, required=True)
@click.pass_context
def add_category(ctx, name: str, kind: str):
    """Add a category.

    Examples:
        ledgerbook category add "Manutenção" --type expense
    """
    try:
        snapshot = CategoryService(get_snapshot(ctx)).add_category(TransactionKind(kind), name)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Added {kind} category '{name.strip()}'")


@category_group.command("rename")
@click.argument("old_name")
@click.argument("new_name")
@click.option("--type", "kind", type=KIND_CHOICE, required=True)
@click.pass_context
def rename_category(ctx, old_name: str, new_name: str, kind: str):
    """Rename a category; postings of the same type follow the new name."""
    try:
        snapshot = CategoryService(get_snapshot(ctx)).rename_category(
            TransactionKind(kind), old_name, new_name
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Renamed '{old_name}' to '{new_name.strip()}'")


@category_group.command("delete")
@click.argument("name")
@click.option("--type", "kind", type=KIND_CHOICE, required=True)
@click.pass_context
def delete_category(ctx, name: str, kind: str):
    """Delete a category. Existing postings keep the name."""
    try:
        snapshot = CategoryService(get_snapshot(ctx)).delete_category(TransactionKind(kind), name)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Deleted {kind} category '{name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
