"""Product expiration commands."""

from dataclasses import replace

import click
from ledgerbook.cli.date_filters import parse_date_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import commit, get_snapshot
from ledgerbook.domain.entities import ExpirationStatus
from ledgerbook.domain.inventory import InventoryService
from ledgerbook.utils.date_parser import format_date

STATUSES = [s.value for s in ExpirationStatus]


def _remaining_label(days: int) -> str:
    if days < 0:
        return f"expired {abs(days)} day(s) ago"
    if days == 0:
        return "expires today"
    return f"{days} day(s)"


@click.group()
def inventory_group():
    """Track products by expiration date."""
    pass


@inventory_group.command("add")
@click.argument("barcode")
@click.argument("description")
@click.option("--quantity", type=int, default=1, show_default=True)
@click.option("--expires", required=True, help="Expiration date")
@click.pass_context
def add_product(ctx, barcode: str, description: str, quantity: int, expires: str):
    """Start tracking a product.

    Examples:
        ledgerbook inventory add 7891000100103 "Leite Integral 1L" --quantity 12 --expires 30/06/2024
    """
    expiration_date = parse_date_or_exit(ctx, expires, "expiration date")
    try:
        snapshot, product = InventoryService(get_snapshot(ctx)).add_product(
            barcode, description, quantity, expiration_date
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Added product {product.id}: {product.description} ({format_date(product.expiration_date)})")


@inventory_group.command("list")
@click.option("--search", default="", help="Text in the description or barcode")
@click.option("--status", type=click.Choice(STATUSES), help="Only products with this status")
@click.pass_context
def list_products(ctx, search: str, status: str | None):
    """List products, soonest expiration first."""
    service = InventoryService(get_snapshot(ctx))
    products = service.list_products(
        search=search, status=ExpirationStatus(status) if status else None
    )
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"\n{'Expires':<12} {'Qty':>5}  {'Barcode':<15} {'Description':<30} Status")
    click.echo("-" * 90)
    for p in products:
        click.echo(
            f"{format_date(p.expiration_date):<12} {p.quantity:>5}  {p.barcode:<15} "
            f"{p.description[:30]:<30} {_remaining_label(service.days_left(p))} [{p.id}]"
        )


@inventory_group.command("edit")
@click.argument("product_id")
@click.option("--barcode")
@click.option("--description")
@click.option("--quantity", type=int)
@click.option("--expires", help="Expiration date")
@click.pass_context
def edit_product(
    ctx,
    product_id: str,
    barcode: str | None,
    description: str | None,
    quantity: int | None,
    expires: str | None,
):
    """Edit a tracked product."""
    service = InventoryService(get_snapshot(ctx))
    try:
        product = service.require_product(product_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    changes = {}
    if barcode is not None:
        changes["barcode"] = barcode
    if description is not None:
        changes["description"] = description
    if quantity is not None:
        changes["quantity"] = quantity
    if expires is not None:
        changes["expiration_date"] = parse_date_or_exit(ctx, expires, "expiration date")
    if not changes:
        click.echo("Nothing to change.")
        return

    try:
        snapshot = service.update_product(replace(product, **changes))
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Updated product {product_id}")


@inventory_group.command("delete")
@click.argument("product_id")
@click.pass_context
def delete_product(ctx, product_id: str):
    """Stop tracking a product."""
    service = InventoryService(get_snapshot(ctx))
    try:
        product = service.require_product(product_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not click.confirm(f"Are you sure you want to delete '{product.description}'?"):
        click.echo("Deletion cancelled.")
        return

    commit(ctx, service.delete_product(product_id))
    click.echo(f"Deleted product {product_id}")


@inventory_group.command("summary")
@click.pass_context
def summary(ctx):
    """Count products per expiration status."""
    totals = InventoryService(get_snapshot(ctx)).summary()
    click.echo(f"{'Expired:':<24} {totals.expired}")
    click.echo(f"{'Attention (30 days):':<24} {totals.attention}")
    click.echo(f"{'OK:':<24} {totals.ok}")
    click.echo(f"{'Items in stock:':<24} {totals.total_items}")
    if totals.next_expiration is not None:
        click.echo(f"{'Next expiration:':<24} {format_date(totals.next_expiration)}")


def register_commands(cli):
    """Register inventory commands with main CLI."""
    cli.add_command(inventory_group, name="inventory")
