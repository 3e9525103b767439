"""Summary and report commands."""

import click
from ledgerbook.cli.state import get_snapshot
from ledgerbook.domain.entities import ReportPeriod
from ledgerbook.domain.summary import SummaryService
from ledgerbook.utils.date_parser import format_date, today_utc


@click.group()
def summary_group():
    """Dashboard totals, running balance and expenses by category."""
    pass


@summary_group.command("dashboard")
@click.pass_context
def dashboard(ctx):
    """Show initial balance, operating revenue and expense, and final balance.

    Transfers between accounts are not counted as revenue or expense.
    """
    totals = SummaryService(get_snapshot(ctx)).dashboard()
    click.echo("\nDashboard:")
    click.echo("-" * 40)
    click.echo(f"{'Initial balance':<20} R$ {totals.initial_balance:>14,.2f}")
    click.echo(f"{'Revenue':<20} R$ {totals.revenue:>14,.2f}")
    click.echo(f"{'Expenses':<20} R$ {totals.expense:>14,.2f}")
    click.echo("-" * 40)
    click.echo(f"{'Final balance':<20} R$ {totals.final_balance:>14,.2f}")


@summary_group.command("balance")
@click.option("--last", "limit", type=int, help="Only the most recent N dates")
@click.pass_context
def running_balance(ctx, limit: int | None):
    """Show the balance after each day with postings."""
    points = SummaryService(get_snapshot(ctx)).running_balance()
    if not points:
        click.echo("No transactions found.")
        return
    if limit:
        points = points[-limit:]

    click.echo(f"\n{'Date':<12} {'Revenue':>14} {'Expenses':>14} {'Balance':>16}")
    click.echo("-" * 60)
    for point in points:
        click.echo(
            f"{format_date(point.date):<12} {point.revenue:>14,.2f} "
            f"{point.expense:>14,.2f} {point.balance:>16,.2f}"
        )


@summary_group.command("expenses")
@click.option("--year", type=int, help="Only this year")
@click.option("--month", type=click.IntRange(1, 12), help="Only this month (needs --year)")
@click.pass_context
def expenses(ctx, year: int | None, month: int | None):
    """Show operating expenses per category, largest first."""
    if month is not None and year is None:
        click.echo("Error: --month requires --year", err=True)
        ctx.exit(1)

    totals = SummaryService(get_snapshot(ctx)).expenses_by_category(year=year, month=month)
    if not totals:
        click.echo("No expenses found.")
        return

    overall = sum(totals.values())
    for category, amount in totals.items():
        share = amount / overall * 100
        click.echo(f"{category:<40} R$ {amount:>14,.2f} {share:>6.1f}%")
    click.echo("-" * 68)
    click.echo(f"{'Total':<40} R$ {overall:>14,.2f}")


@click.command("report")
@click.option("--year", type=int, help="Defaults to the current year")
@click.option(
    "--period",
    type=click.Choice([p.value for p in ReportPeriod]),
    default="monthly",
    show_default=True,
)
@click.pass_context
def report(ctx, year: int | None, period: str):
    """Show a year of results by month, quarter or for the whole year.

    Examples:
        ledgerbook report --year 2024
        ledgerbook report --period quarterly
    """
    if year is None:
        year = today_utc().year
    result = SummaryService(get_snapshot(ctx)).period_report(year, ReportPeriod(period))

    click.echo(f"\nReport {result.year} ({result.period.value})")
    click.echo(f"Starting balance: R$ {result.starting_balance:,.2f}")
    click.echo("-" * 78)
    click.echo(f"{'Period':<8} {'Revenue':>16} {'Expenses':>16} {'Net':>16} {'Balance':>18}")
    click.echo("-" * 78)
    for row in result.rows:
        click.echo(
            f"{row.label:<8} {row.revenue:>16,.2f} {row.expense:>16,.2f} "
            f"{row.net:>16,.2f} {row.cumulative_balance:>18,.2f}"
        )
    click.echo("-" * 78)
    click.echo(
        f"{'Total':<8} {result.revenue:>16,.2f} {result.expense:>16,.2f} "
        f"{result.revenue - result.expense:>16,.2f} {result.final_balance:>18,.2f}"
    )


def register_commands(cli):
    """Register summary and report commands with main CLI."""
    cli.add_command(summary_group, name="summary")
    cli.add_command(report)
