"""Payroll computation.

Two table-driven progressive functions: a pension-like contribution taxed
slice by slice up to a cap, and an income-tax-like withholding computed as
``adjusted_base * rate - deduction`` for the bracket the adjusted base falls
in. Results are not rounded and a negative net pay is returned as is.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ledgerbook.config import (
    CONTRIBUTION_BRACKETS,
    CONTRIBUTION_CAP,
    WITHHOLDING_BRACKETS,
)
from ledgerbook.domain.entities import (
    Employee,
    PayrollEntry,
    PayrollEntryKind,
    PayrollSummary,
    Payslip,
    Snapshot,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def contribution(
    base: Decimal,
    brackets: Sequence[tuple[Decimal, Decimal]] = CONTRIBUTION_BRACKETS,
    cap: Decimal = CONTRIBUTION_CAP,
) -> Decimal:
    """Compute the pension contribution for a gross base.

    Each slice of the base is charged at the rate of the bracket it falls
    in, so the result is continuous across bracket bounds. Bases above the
    highest bound pay the fixed cap.

    Args:
        base: Gross salary
        brackets: (inclusive upper bound, rate) pairs in ascending order
        cap: Amount due above the highest bound

    Returns:
        Contribution amount
    """
    if base <= 0:
        return ZERO
    if base > brackets[-1][0]:
        return cap

    total = ZERO
    lower = ZERO
    for upper, rate in brackets:
        if base <= upper:
            total += (base - lower) * rate
            break
        total += (upper - lower) * rate
        lower = upper
    return min(total, cap)


def withholding(
    base: Decimal,
    contribution_amount: Decimal,
    brackets: Sequence[tuple[Optional[Decimal], Decimal, Decimal]] = WITHHOLDING_BRACKETS,
) -> Decimal:
    """Compute income tax withholding.

    Args:
        base: Gross salary
        contribution_amount: Pension contribution already due on the base
        brackets: (inclusive upper bound or None, rate, deduction) triples

    Returns:
        Withholding amount, 0 below the lowest bracket
    """
    adjusted_base = base - contribution_amount
    for upper, rate, deduction in brackets:
        if upper is None or adjusted_base <= upper:
            if rate == 0:
                return ZERO
            return adjusted_base * rate - deduction
    return ZERO


def compute_payslip(
    employee: Employee, entries: Iterable[PayrollEntry], month: int, year: int
) -> Payslip:
    """Compute gross, statutory deductions and net pay for one month.

    Only entries of this employee for the given month and year are used.
    """
    relevant = [
        e
        for e in entries
        if e.employee_id == employee.id and e.month == month and e.year == year
    ]
    earnings = tuple(e for e in relevant if e.kind is PayrollEntryKind.EARNING)
    manual_deductions = tuple(
        e for e in relevant if e.kind is PayrollEntryKind.DEDUCTION
    )

    total_earnings = sum((e.amount for e in earnings), ZERO)
    total_manual = sum((e.amount for e in manual_deductions), ZERO)

    gross = employee.salary + total_earnings
    contribution_amount = contribution(gross)
    withholding_amount = withholding(gross, contribution_amount)
    total_deductions = total_manual + contribution_amount + withholding_amount

    return Payslip(
        employee=employee,
        base_salary=employee.salary,
        earnings=earnings,
        manual_deductions=manual_deductions,
        gross=gross,
        contribution=contribution_amount,
        withholding=withholding_amount,
        total_deductions=total_deductions,
        net_pay=gross - total_deductions,
    )


class PayrollService:
    """Service for monthly payroll runs. Nothing here posts to the ledger."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def run(self, month: int, year: int) -> PayrollSummary:
        """Compute payslips of all active employees for a month.

        Args:
            month: Month 1-12
            year: Year

        Returns:
            PayrollSummary with one payslip per active employee
        """
        payslips = tuple(
            compute_payslip(emp, self.snapshot.payroll_entries, month, year)
            for emp in self.snapshot.employees
            if emp.is_active
        )
        for slip in payslips:
            if slip.net_pay < 0:
                logger.warning(
                    "Negative net pay %s for %s in %02d/%d",
                    slip.net_pay,
                    slip.employee.name,
                    month,
                    year,
                )
        return PayrollSummary(
            month=month,
            year=year,
            payslips=payslips,
            gross=sum((p.gross for p in payslips), ZERO),
            deductions=sum((p.total_deductions for p in payslips), ZERO),
            net=sum((p.net_pay for p in payslips), ZERO),
        )
