"""Reporting domain service.

Operational totals leave out transfer postings, which only move money
between accounts. Balances always use every posting.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledgerbook.config import PT_BR_MONTHS, TRANSFER_CATEGORIES
from ledgerbook.domain.balance import chronological, total_initial_balance
from ledgerbook.domain.entities import (
    BalancePoint,
    DashboardTotals,
    PeriodReport,
    PeriodRow,
    ReportPeriod,
    Snapshot,
    Transaction,
    TransactionKind,
)

ZERO = Decimal("0")


def is_operational(txn: Transaction) -> bool:
    """True unless the posting is one leg of a transfer."""
    return txn.category not in TRANSFER_CATEGORIES


def _sum_kind(transactions: Iterable[Transaction], kind: TransactionKind) -> Decimal:
    return sum((t.amount for t in transactions if t.kind is kind), ZERO)


class SummaryService:
    """Service for dashboard totals and period reports."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def operational_transactions(self) -> list[Transaction]:
        return [t for t in self.snapshot.transactions if is_operational(t)]

    def dashboard(self) -> DashboardTotals:
        """Initial balance, operational revenue and expense, and final balance."""
        initial = total_initial_balance(self.snapshot)
        operational = self.operational_transactions()
        final = initial + sum((t.signed_amount for t in self.snapshot.transactions), ZERO)
        return DashboardTotals(
            initial_balance=initial,
            revenue=_sum_kind(operational, TransactionKind.REVENUE),
            expense=_sum_kind(operational, TransactionKind.EXPENSE),
            final_balance=final,
        )

    def running_balance(self) -> list[BalancePoint]:
        """Per-date series of operational flow and the cumulative balance.

        Dates come from every posting; the balance after each date includes
        transfers, revenue and expense of the day do not.
        """
        revenue: dict[date, Decimal] = defaultdict(lambda: ZERO)
        expense: dict[date, Decimal] = defaultdict(lambda: ZERO)
        net: dict[date, Decimal] = {}

        for txn in chronological(self.snapshot.transactions):
            net[txn.date] = net.get(txn.date, ZERO) + txn.signed_amount
            if not is_operational(txn):
                continue
            if txn.kind is TransactionKind.REVENUE:
                revenue[txn.date] += txn.amount
            else:
                expense[txn.date] += txn.amount

        points = []
        balance = total_initial_balance(self.snapshot)
        for day in net:
            balance += net[day]
            points.append(
                BalancePoint(date=day, revenue=revenue[day], expense=expense[day], balance=balance)
            )
        return points

    def period_report(self, year: int, period: ReportPeriod) -> PeriodReport:
        """Operational results of a year grouped by month, quarter or year.

        Args:
            year: Calendar year
            period: Grouping of the rows

        Returns:
            PeriodReport starting from the balance at the beginning of the year
        """
        prior = sum(
            (t.signed_amount for t in self.snapshot.transactions if t.date.year < year),
            ZERO,
        )
        starting = total_initial_balance(self.snapshot) + prior

        if period is ReportPeriod.MONTHLY:
            labels = [month[:3] for month in PT_BR_MONTHS]
        elif period is ReportPeriod.QUARTERLY:
            labels = ["Q1", "Q2", "Q3", "Q4"]
        else:
            labels = [str(year)]

        revenue = [ZERO] * len(labels)
        expense = [ZERO] * len(labels)
        total_net = [ZERO] * len(labels)
        for txn in self.snapshot.transactions:
            if txn.date.year != year:
                continue
            index = self._period_index(txn.date, period)
            total_net[index] += txn.signed_amount
            if not is_operational(txn):
                continue
            if txn.kind is TransactionKind.REVENUE:
                revenue[index] += txn.amount
            else:
                expense[index] += txn.amount

        rows = []
        cumulative = starting
        for i, label in enumerate(labels):
            cumulative += total_net[i]
            rows.append(
                PeriodRow(
                    label=label,
                    revenue=revenue[i],
                    expense=expense[i],
                    net=revenue[i] - expense[i],
                    total_net=total_net[i],
                    cumulative_balance=cumulative,
                )
            )

        return PeriodReport(
            year=year,
            period=period,
            starting_balance=starting,
            rows=tuple(rows),
            revenue=sum(revenue, ZERO),
            expense=sum(expense, ZERO),
            final_balance=cumulative,
        )

    def expenses_by_category(
        self, year: Optional[int] = None, month: Optional[int] = None
    ) -> dict[str, Decimal]:
        """Operational expenses per category, largest first."""
        totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for txn in self.operational_transactions():
            if txn.kind is not TransactionKind.EXPENSE:
                continue
            if year is not None and txn.date.year != year:
                continue
            if month is not None and txn.date.month != month:
                continue
            totals[txn.category] += txn.amount
        return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))

    def years(self) -> list[int]:
        """Years with postings, most recent first."""
        return sorted({t.date.year for t in self.snapshot.transactions}, reverse=True)

    @staticmethod
    def _period_index(day: date, period: ReportPeriod) -> int:
        if period is ReportPeriod.MONTHLY:
            return day.month - 1
        if period is ReportPeriod.QUARTERLY:
            return (day.month - 1) // 3
        return 0
