"""Daily sales domain service.

A day of sales is posted to the ledger as one group of up to four postings
(cash, net electronic, investment and acquirer fee) sharing a
``SALES_LAUNCH`` provenance keyed by the sales date. The group is only ever
replaced as a whole: editing a launched day retracts the group and launches
it again from the current figures and fee rates.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from ledgerbook.config import (
    CASH_ACCOUNT,
    ELECTRONIC_ACCOUNT,
    FEE_CATEGORY,
    FEE_SUPPLIER,
    INVESTMENT_ACCOUNT,
    PT_BR_WEEKDAYS,
    SALES_CATEGORY,
)
from ledgerbook.domain.entities import (
    CREDIT_CHANNELS,
    DEBIT_CHANNELS,
    SALES_CHANNELS,
    ChangeStatus,
    FeeBreakdown,
    LedgerChange,
    PostingSource,
    SalesRecord,
    Snapshot,
    SourceKind,
    Transaction,
    TransactionKind,
)
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    sale_not_found,
)
from ledgerbook.domain.fees import calculate_fees, digital_total
from ledgerbook.domain.ledger import (
    append_postings,
    new_id,
    next_doc_number,
    remove_postings,
)
from ledgerbook.utils.date_parser import format_date, start_of_week

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class SalesTotals:
    """Channel sums with derived fee and investment for one or more days."""

    channels: dict[str, Decimal]
    fee: Decimal
    investment: Decimal
    total: Decimal


@dataclass(frozen=True)
class PaymentBreakdown:
    cash: Decimal
    pix: Decimal
    credit: Decimal
    debit: Decimal


def launch_source(sales_date: date) -> PostingSource:
    """Provenance shared by every posting of one day's launch."""
    return PostingSource(kind=SourceKind.SALES_LAUNCH, ref=sales_date.isoformat())


def build_launch_postings(
    record: SalesRecord, fees: FeeBreakdown, existing: tuple[Transaction, ...]
) -> list[Transaction]:
    """Build the postings for one day of sales.

    The revenue postings add up to the day total. The fee is a separate
    expense on the electronic account with its own document number.
    """
    source = launch_source(record.date)
    label = format_date(record.date)
    doc_number = next_doc_number(existing)
    fee_doc_number = next_doc_number(existing, category=FEE_CATEGORY)

    def revenue(suffix: str, description: str, account: str, amount: Decimal) -> Transaction:
        return Transaction(
            id=new_id(f"trans-sale-{suffix}"),
            kind=TransactionKind.REVENUE,
            date=record.date,
            description=description,
            category=SALES_CATEGORY,
            account=account,
            amount=amount,
            doc_number=doc_number,
            source=source,
        )

    postings = []
    if record.cash > 0:
        postings.append(
            revenue("cash", f"Venda do dia {label} (Dinheiro)", CASH_ACCOUNT, record.cash)
        )

    net_electronic = digital_total(record) - fees.investment
    if net_electronic > 0:
        postings.append(
            revenue(
                "elec", f"Venda do dia {label} (Eletrônico)", ELECTRONIC_ACCOUNT, net_electronic
            )
        )

    if fees.investment > 0:
        postings.append(
            revenue(
                "invest", f"Investimento da venda {label}", INVESTMENT_ACCOUNT, fees.investment
            )
        )

    if fees.fee > 0:
        postings.append(
            Transaction(
                id=new_id("trans-fee"),
                kind=TransactionKind.EXPENSE,
                date=record.date,
                description=f"Taxas e tarifas da venda {label}",
                category=FEE_CATEGORY,
                account=ELECTRONIC_ACCOUNT,
                amount=fees.fee,
                supplier=FEE_SUPPLIER,
                doc_number=fee_doc_number,
                source=source,
            )
        )
    return postings


class SalesService:
    """Service for daily sales records and their ledger postings."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def create_week(self, any_date: date) -> tuple[Snapshot, list[SalesRecord]]:
        """Create empty sales records for Monday through Sunday.

        Args:
            any_date: Any day inside the wanted week

        Returns:
            Tuple of (new snapshot, created records)

        Raises:
            ConflictError: If a record already exists for that week
        """
        monday = start_of_week(any_date)
        week = [monday + timedelta(days=i) for i in range(7)]
        taken = {s.date for s in self.snapshot.sales}
        if any(day in taken for day in week):
            raise ConflictError(f"Sales week starting {format_date(monday)} already exists")

        records = [
            SalesRecord(
                id=new_id("sale"),
                date=day,
                day_of_week=PT_BR_WEEKDAYS[day.weekday()],
            )
            for day in week
        ]
        sales = tuple(sorted(self.snapshot.sales + tuple(records), key=lambda s: s.date))
        logger.info("Created sales week starting %s", monday)
        return replace(self.snapshot, sales=sales), records

    def get_sale(self, sale_id: str) -> Optional[SalesRecord]:
        for sale in self.snapshot.sales:
            if sale.id == sale_id:
                return sale
        return None

    def require_sale(self, sale_id: str) -> SalesRecord:
        sale = self.get_sale(sale_id)
        if sale is None:
            raise NotFoundError(sale_not_found(sale_id))
        return sale

    def find_by_date(self, sales_date: date) -> Optional[SalesRecord]:
        for sale in self.snapshot.sales:
            if sale.date == sales_date:
                return sale
        return None

    def week(self, any_date: date) -> list[SalesRecord]:
        """Records of the Monday-to-Sunday week containing the date."""
        monday = start_of_week(any_date)
        return [s for s in self.snapshot.sales if 0 <= (s.date - monday).days < 7]

    def update_sale(self, sale_id: str, channel: str, amount: Decimal) -> Snapshot:
        """Set the amount of one payment channel.

        Launched postings are not touched; use ``relaunch`` afterwards.

        Raises:
            NotFoundError: If the record does not exist
            ValidationError: If the channel is unknown or the amount negative
        """
        sale = self.require_sale(sale_id)
        if channel not in SALES_CHANNELS:
            raise ValidationError(f"Unknown sales channel '{channel}'")
        if not amount.is_finite() or amount < 0:
            raise ValidationError(f"Sales amount cannot be negative, got {amount}")

        updated = replace(sale, **{channel: amount})
        return replace(
            self.snapshot,
            sales=tuple(updated if s.id == sale_id else s for s in self.snapshot.sales),
        )

    def launched_dates(self) -> set[date]:
        """Sales dates that currently have launch postings in the ledger.

        The date comes from the provenance, so a posting whose date was
        edited still counts for the day it was launched from.
        """
        return {
            date.fromisoformat(t.source.ref)
            for t in self.snapshot.transactions
            if t.source.kind is SourceKind.SALES_LAUNCH and t.source.ref
        }

    def is_launched(self, sales_date: date) -> bool:
        return bool(self._launch_postings(sales_date))

    def _launch_postings(self, sales_date: date) -> list[Transaction]:
        source = launch_source(sales_date)
        return [t for t in self.snapshot.transactions if t.source == source]

    def launch(self, sale_id: str) -> LedgerChange:
        """Post one day of sales to the ledger.

        Returns:
            LedgerChange with the new postings, or status ALREADY_POSTED and
            an unchanged snapshot when the day is already launched

        Raises:
            NotFoundError: If the record does not exist
            ValidationError: If the day total is zero
        """
        sale = self.require_sale(sale_id)
        if sale.total <= 0:
            raise ValidationError(
                f"Sales of {format_date(sale.date)} total zero and cannot be launched"
            )
        if self.is_launched(sale.date):
            logger.info("Sales of %s already launched", sale.date)
            return LedgerChange(snapshot=self.snapshot, status=ChangeStatus.ALREADY_POSTED)

        fees = calculate_fees(sale, self.snapshot.fee_configuration)
        postings = build_launch_postings(sale, fees, self.snapshot.transactions)
        logger.info("Launched sales of %s as %d posting(s)", sale.date, len(postings))
        return LedgerChange(
            snapshot=append_postings(self.snapshot, postings), added=tuple(postings)
        )

    def retract(self, sale_id: str) -> LedgerChange:
        """Remove the launch postings of a day. A no-op if there are none.

        Postings are matched by their launch provenance, so ones whose
        date was edited afterwards are removed too.
        """
        sale = self.require_sale(sale_id)
        source = launch_source(sale.date)
        snapshot, removed = remove_postings(self.snapshot, lambda t: t.source == source)
        if not removed:
            return LedgerChange(snapshot=snapshot, status=ChangeStatus.NOTHING_TO_RETRACT)
        logger.info("Retracted %d posting(s) of sales %s", len(removed), sale.date)
        return LedgerChange(snapshot=snapshot, removed=removed)

    def relaunch(self, sale_id: str) -> LedgerChange:
        """Replace a day's launch postings with ones built from current values.

        Raises:
            NotFoundError: If the record does not exist
            ValidationError: If the day total is zero; the ledger is unchanged
        """
        sale = self.require_sale(sale_id)
        if sale.total <= 0:
            raise ValidationError(
                f"Sales of {format_date(sale.date)} must total more than zero"
            )
        retracted = self.retract(sale_id)
        launched = SalesService(retracted.snapshot).launch(sale_id)
        return LedgerChange(
            snapshot=launched.snapshot,
            status=launched.status,
            added=launched.added,
            removed=retracted.removed,
        )

    def totals(self, records: list[SalesRecord]) -> SalesTotals:
        """Sum channels, fees and investment over the given records."""
        config = self.snapshot.fee_configuration
        channels = {
            name: sum((r.channel(name) for r in records), ZERO) for name in SALES_CHANNELS
        }
        breakdowns = [calculate_fees(r, config) for r in records]
        return SalesTotals(
            channels=channels,
            fee=sum((b.fee for b in breakdowns), ZERO),
            investment=sum((b.investment for b in breakdowns), ZERO),
            total=sum(channels.values(), ZERO),
        )

    def day_totals(self, sale_id: str) -> SalesTotals:
        return self.totals([self.require_sale(sale_id)])

    def week_totals(self, any_date: date) -> SalesTotals:
        return self.totals(self.week(any_date))

    def payment_breakdown(self, records: list[SalesRecord]) -> PaymentBreakdown:
        """Group channel sums by payment method."""
        channels = self.totals(records).channels
        return PaymentBreakdown(
            cash=channels["cash"],
            pix=channels["pix_manual"] + channels["pix_qr_code"],
            credit=sum((channels[c] for c in CREDIT_CHANNELS), ZERO),
            debit=sum((channels[c] for c in DEBIT_CHANNELS), ZERO),
        )
