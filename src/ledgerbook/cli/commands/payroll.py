"""Employee and payroll commands."""

from dataclasses import replace

import click
from ledgerbook.cli.date_filters import parse_date_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.state import commit, get_snapshot
from ledgerbook.domain.employee import EmployeeService
from ledgerbook.domain.entities import PayrollEntryKind
from ledgerbook.domain.payroll import PayrollService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import format_date, today_utc


@click.group()
def payroll_group():
    """Manage employees, payroll entries and monthly payslips."""
    pass


@payroll_group.group("employee")
def employee_group():
    """Manage employees."""
    pass


@employee_group.command("add")
@click.argument("name")
@click.option("--position", default="", help="Job title")
@click.option("--admission-date", default="today", help="Hiring date")
@click.option("--salary", required=True, help="Monthly base salary")
@click.pass_context
def add_employee(ctx, name: str, position: str, admission_date: str, salary: str):
    """Add an employee.

    Examples:
        ledgerbook payroll employee add "Maria Souza" --position Vendedora --salary "2.500,00"
    """
    admission = parse_date_or_exit(ctx, admission_date, "admission date")
    try:
        snapshot, employee = EmployeeService(get_snapshot(ctx)).add_employee(
            name=name, position=position, admission_date=admission, salary=parse_amount(salary)
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Added employee '{employee.name}' (ID: {employee.id})")


@employee_group.command("list")
@click.option("--active", "active_only", is_flag=True, help="Only active employees")
@click.pass_context
def list_employees(ctx, active_only: bool):
    """List employees."""
    employees = EmployeeService(get_snapshot(ctx)).list_employees(active_only=active_only)
    if not employees:
        click.echo("No employees found.")
        return

    click.echo("\nEmployees:")
    click.echo("-" * 90)
    for emp in employees:
        click.echo(
            f"{emp.id:<40} {emp.name[:20]:<20} {emp.position[:14]:<14} "
            f"R$ {emp.salary:>10,.2f} {emp.status.value}"
        )


@employee_group.command("edit")
@click.argument("employee_id")
@click.option("--name")
@click.option("--position")
@click.option("--admission-date")
@click.option("--salary")
@click.pass_context
def edit_employee(
    ctx,
    employee_id: str,
    name: str | None,
    position: str | None,
    admission_date: str | None,
    salary: str | None,
):
    """Change employee details. Only the given fields change."""
    service = EmployeeService(get_snapshot(ctx))
    try:
        employee = service.require_employee(employee_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    changes = {}
    if name is not None:
        changes["name"] = name.strip()
    if position is not None:
        changes["position"] = position
    if admission_date is not None:
        changes["admission_date"] = parse_date_or_exit(ctx, admission_date, "admission date")

    try:
        if salary is not None:
            changes["salary"] = parse_amount(salary)
        snapshot = service.update_employee(replace(employee, **changes))
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Updated employee {employee_id}")


@employee_group.command("toggle")
@click.argument("employee_id")
@click.pass_context
def toggle_employee(ctx, employee_id: str):
    """Switch an employee between active and inactive."""
    try:
        snapshot = EmployeeService(get_snapshot(ctx)).toggle_status(employee_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    employee = EmployeeService(snapshot).require_employee(employee_id)
    click.echo(f"Employee '{employee.name}' is now {employee.status.value}")


@payroll_group.group("entry")
def entry_group():
    """Manage monthly earnings and deductions."""
    pass


@entry_group.command("add")
@click.argument("employee_id")
@click.option("--type", "kind", type=click.Choice([k.value for k in PayrollEntryKind]), required=True)
@click.option("--description", required=True)
@click.option("--amount", required=True)
@click.option("--month", type=click.IntRange(1, 12), help="Defaults to the current month")
@click.option("--year", type=int, help="Defaults to the current year")
@click.pass_context
def add_entry(
    ctx,
    employee_id: str,
    kind: str,
    description: str,
    amount: str,
    month: int | None,
    year: int | None,
):
    """Record an earning or a deduction for one month.

    Examples:
        ledgerbook payroll entry add emp-1a2b --type earning --description "Hora extra" --amount 300
    """
    today = today_utc()
    try:
        snapshot, entry = EmployeeService(get_snapshot(ctx)).add_entry(
            employee_id=employee_id,
            description=description,
            kind=PayrollEntryKind(kind),
            amount=parse_amount(amount),
            month=month or today.month,
            year=year or today.year,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Added {kind} '{description}' for {entry.employee_name} ({entry.month:02d}/{entry.year})")


@entry_group.command("list")
@click.option("--month", type=click.IntRange(1, 12))
@click.option("--year", type=int)
@click.option("--employee", "employee_id", help="Employee ID")
@click.pass_context
def list_entries(ctx, month: int | None, year: int | None, employee_id: str | None):
    """List payroll entries."""
    entries = EmployeeService(get_snapshot(ctx)).list_entries(
        month=month, year=year, employee_id=employee_id
    )
    if not entries:
        click.echo("No payroll entries found.")
        return

    for entry in entries:
        click.echo(
            f"{entry.id:<40} {entry.month:02d}/{entry.year} {entry.employee_name[:20]:<20} "
            f"{entry.kind.value:<9} R$ {entry.amount:>10,.2f} {entry.description}"
        )


@entry_group.command("delete")
@click.argument("entry_id")
@click.pass_context
def delete_entry(ctx, entry_id: str):
    """Delete a payroll entry."""
    try:
        snapshot = EmployeeService(get_snapshot(ctx)).delete_entry(entry_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    commit(ctx, snapshot)
    click.echo(f"Deleted payroll entry {entry_id}")


@payroll_group.command("run")
@click.option("--month", type=click.IntRange(1, 12), help="Defaults to the current month")
@click.option("--year", type=int, help="Defaults to the current year")
@click.pass_context
def run_payroll(ctx, month: int | None, year: int | None):
    """Compute the payslips of all active employees for a month.

    Nothing is posted to the ledger.
    """
    today = today_utc()
    summary = PayrollService(get_snapshot(ctx)).run(month or today.month, year or today.year)
    if not summary.payslips:
        click.echo("No active employees.")
        return

    click.echo(f"\nPayroll {summary.month:02d}/{summary.year}")
    for slip in summary.payslips:
        click.echo("=" * 60)
        click.echo(f"{slip.employee.name} - {slip.employee.position}")
        click.echo(f"  Admission: {format_date(slip.employee.admission_date)}")
        click.echo(f"  Base salary:       R$ {slip.base_salary:>12,.2f}")
        for entry in slip.earnings:
            click.echo(f"  + {entry.description[:16]:<16} R$ {entry.amount:>12,.2f}")
        click.echo(f"  Gross:             R$ {slip.gross:>12,.2f}")
        click.echo(f"  Contribution:      R$ {slip.contribution:>12,.2f}")
        click.echo(f"  Withholding:       R$ {slip.withholding:>12,.2f}")
        for entry in slip.manual_deductions:
            click.echo(f"  - {entry.description[:16]:<16} R$ {entry.amount:>12,.2f}")
        click.echo(f"  Net pay:           R$ {slip.net_pay:>12,.2f}")
    click.echo("=" * 60)
    click.echo(
        f"TOTAL  Gross: R$ {summary.gross:,.2f} | Deductions: R$ {summary.deductions:,.2f} | "
        f"Net: R$ {summary.net:,.2f}"
    )


def register_commands(cli):
    """Register payroll commands with main CLI."""
    cli.add_command(payroll_group, name="payroll")
