"""Acquirer fee configuration commands."""

from dataclasses import replace

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import commit, get_snapshot
from ledgerbook.domain.entities import RATED_CHANNELS
from ledgerbook.domain.fees import validate_fee_configuration
from ledgerbook.domain.snapshot import replace_fee_configuration
from ledgerbook.utils.amount_parser import parse_amount


@click.group()
def fees_group():
    """Show or change acquirer fee rates and the investment share."""
    pass


@fees_group.command("show")
@click.pass_context
def show_fees(ctx):
    """Show the current rates (percent)."""
    config = get_snapshot(ctx).fee_configuration
    click.echo("\nFee rates:")
    click.echo("-" * 36)
    for name in RATED_CHANNELS:
        click.echo(f"{name:<22} {config.rate(name):>10}%")
    click.echo("-" * 36)
    click.echo(f"{'investment':<22} {config.investment_percentage:>10}%")


@fees_group.command("set")
@click.option("--credit-visa")
@click.option("--credit-mastercard")
@click.option("--credit-elo")
@click.option("--debit-visa")
@click.option("--debit-mastercard")
@click.option("--debit-elo")
@click.option("--pix-qr-code")
@click.option("--investment", "investment_percentage", help="Share of net digital sales to invest")
@click.pass_context
def set_fees(ctx, **rates):
    """Change one or more rates, given as percentages (0-100).

    Days already launched keep their postings until relaunched.

    Examples:
        ledgerbook fees set --credit-visa 3,15 --debit-visa 1,37
        ledgerbook fees set --investment 10
    """
    changes = {name: value for name, value in rates.items() if value is not None}
    if not changes:
        click.echo("Error: Nothing to change; give at least one rate option", err=True)
        ctx.exit(1)

    snapshot = get_snapshot(ctx)
    try:
        config = replace(
            snapshot.fee_configuration,
            **{name: parse_amount(value) for name, value in changes.items()},
        )
        validate_fee_configuration(config)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, replace_fee_configuration(snapshot, config))
    click.echo(f"Updated {len(changes)} rate(s)")


def register_commands(cli):
    """Register fee commands with main CLI."""
    cli.add_command(fees_group, name="fees")
