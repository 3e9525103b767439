"""Tests for daily sales and their ledger postings."""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from ledgerbook.config import (
    CASH_ACCOUNT,
    ELECTRONIC_ACCOUNT,
    FEE_CATEGORY,
    INVESTMENT_ACCOUNT,
    SALES_CATEGORY,
)
from ledgerbook.domain.balance import account_balances
from ledgerbook.domain.entities import (
    ChangeStatus,
    SourceKind,
    Transaction,
    TransactionKind,
)
from ledgerbook.domain.errors import ConflictError, NotFoundError, ValidationError
from ledgerbook.domain.ledger import append_postings
from ledgerbook.domain.sales import SalesService, launch_source
from ledgerbook.domain.snapshot import replace_fee_configuration
from ledgerbook.domain.transaction import TransactionService

MONDAY = date(2024, 1, 15)


@pytest.fixture
def filled_snapshot(default_snapshot, fee_configuration):
    """Default install with Monday's sales filled in and fees configured."""
    snapshot = replace_fee_configuration(default_snapshot, fee_configuration)
    service = SalesService(snapshot)
    sale = service.find_by_date(MONDAY)
    for channel, amount in [
        ("cash", "200"),
        ("pix_manual", "50"),
        ("pix_qr_code", "100"),
        ("credit_visa", "300"),
        ("debit_mastercard", "150"),
    ]:
        snapshot = SalesService(snapshot).update_sale(sale.id, channel, Decimal(amount))
    return snapshot


@pytest.fixture
def monday_id(filled_snapshot):
    return SalesService(filled_snapshot).find_by_date(MONDAY).id


def _revenue(postings):
    return sum((t.amount for t in postings if t.kind is TransactionKind.REVENUE), Decimal("0"))


class TestCreateWeek:
    def test_initial_snapshot_has_current_week(self, default_snapshot):
        sales = default_snapshot.sales
        assert [s.date for s in sales] == [date(2024, 1, 15 + i) for i in range(7)]
        assert sales[0].day_of_week == "segunda-feira"
        assert sales[-1].day_of_week == "domingo"
        assert all(s.total == 0 for s in sales)

    def test_create_week_from_any_day(self, default_snapshot):
        snapshot, records = SalesService(default_snapshot).create_week(date(2024, 1, 25))

        assert records[0].date == date(2024, 1, 22)
        assert records[-1].date == date(2024, 1, 28)
        assert len(snapshot.sales) == 14
        assert [s.date for s in snapshot.sales] == sorted(s.date for s in snapshot.sales)

    def test_create_existing_week_conflicts(self, default_snapshot):
        with pytest.raises(ConflictError):
            SalesService(default_snapshot).create_week(date(2024, 1, 18))

    def test_earlier_week_sorts_first(self, default_snapshot):
        snapshot, _ = SalesService(default_snapshot).create_week(date(2024, 1, 8))
        assert snapshot.sales[0].date == date(2024, 1, 8)


class TestUpdateSale:
    def test_update_channel(self, filled_snapshot, monday_id):
        sale = SalesService(filled_snapshot).require_sale(monday_id)
        assert sale.cash == Decimal("200")
        assert sale.total == Decimal("800")

    def test_negative_amount_rejected(self, filled_snapshot, monday_id):
        with pytest.raises(ValidationError):
            SalesService(filled_snapshot).update_sale(monday_id, "cash", Decimal("-1"))

    def test_unknown_channel_rejected(self, filled_snapshot, monday_id):
        with pytest.raises(ValidationError):
            SalesService(filled_snapshot).update_sale(monday_id, "cheque", Decimal("1"))

    def test_unknown_sale(self, filled_snapshot):
        with pytest.raises(NotFoundError):
            SalesService(filled_snapshot).update_sale("sale-missing", "cash", Decimal("1"))


class TestLaunch:
    def test_launch_posts_four_postings(self, filled_snapshot, monday_id):
        change = SalesService(filled_snapshot).launch(monday_id)

        assert change.status is ChangeStatus.APPLIED
        by_account = {(t.account, t.kind): t for t in change.added}
        assert by_account[(CASH_ACCOUNT, TransactionKind.REVENUE)].amount == Decimal("200")
        assert by_account[(ELECTRONIC_ACCOUNT, TransactionKind.REVENUE)].amount == Decimal("546.225")
        assert by_account[(INVESTMENT_ACCOUNT, TransactionKind.REVENUE)].amount == Decimal("53.775")
        fee = by_account[(ELECTRONIC_ACCOUNT, TransactionKind.EXPENSE)]
        assert fee.amount == Decimal("12.25")
        assert fee.category == FEE_CATEGORY
        assert fee.supplier == "Adquirente"

    def test_revenue_postings_sum_to_day_total(self, filled_snapshot, monday_id):
        change = SalesService(filled_snapshot).launch(monday_id)
        assert _revenue(change.added) == Decimal("800")

    def test_postings_share_launch_source(self, filled_snapshot, monday_id):
        change = SalesService(filled_snapshot).launch(monday_id)

        assert {t.source for t in change.added} == {launch_source(MONDAY)}
        assert all(t.date == MONDAY for t in change.added)
        assert all(t.category == SALES_CATEGORY for t in change.added if t.kind is TransactionKind.REVENUE)

    def test_document_numbers(self, filled_snapshot, monday_id):
        change = SalesService(filled_snapshot).launch(monday_id)

        revenue_docs = {t.doc_number for t in change.added if t.kind is TransactionKind.REVENUE}
        fee_docs = [t.doc_number for t in change.added if t.kind is TransactionKind.EXPENSE]
        assert revenue_docs == {"1"}
        assert fee_docs == ["1"]

    def test_document_number_follows_existing(self, filled_snapshot, monday_id):
        snapshot = TransactionService(filled_snapshot).create_transaction(
            kind=TransactionKind.EXPENSE,
            date=date(2024, 1, 2),
            description="Nota",
            category="Fornecedores",
            account="Cofre",
            amount=Decimal("10"),
            doc_number="41",
        ).snapshot

        change = SalesService(snapshot).launch(monday_id)
        assert {t.doc_number for t in change.added if t.kind is TransactionKind.REVENUE} == {"42"}

    def test_cash_only_day_posts_one_revenue(self, default_snapshot):
        service = SalesService(default_snapshot)
        sale = service.find_by_date(MONDAY)
        snapshot = service.update_sale(sale.id, "cash", Decimal("75"))

        change = SalesService(snapshot).launch(sale.id)
        assert len(change.added) == 1
        assert change.added[0].account == CASH_ACCOUNT

    def test_launch_is_not_repeated(self, filled_snapshot, monday_id):
        first = SalesService(filled_snapshot).launch(monday_id)
        second = SalesService(first.snapshot).launch(monday_id)

        assert second.status is ChangeStatus.ALREADY_POSTED
        assert second.snapshot is first.snapshot
        assert second.added == ()

    def test_zero_total_rejected(self, default_snapshot):
        service = SalesService(default_snapshot)
        sale = service.find_by_date(MONDAY)

        with pytest.raises(ValidationError):
            service.launch(sale.id)

    def test_launch_moves_balances(self, filled_snapshot, monday_id):
        before = account_balances(filled_snapshot)
        after = account_balances(SalesService(filled_snapshot).launch(monday_id).snapshot)

        assert after[CASH_ACCOUNT] - before[CASH_ACCOUNT] == Decimal("200")
        assert after[ELECTRONIC_ACCOUNT] - before[ELECTRONIC_ACCOUNT] == Decimal("533.975")
        assert sum(after.values()) - sum(before.values()) == Decimal("787.75")


class TestRetract:
    def test_retract_is_inverse_of_launch(self, filled_snapshot, monday_id):
        launched = SalesService(filled_snapshot).launch(monday_id)
        retracted = SalesService(launched.snapshot).retract(monday_id)

        assert retracted.snapshot.transactions == filled_snapshot.transactions
        assert set(retracted.removed) == set(launched.added)

    def test_retract_leaves_other_postings(self, filled_snapshot, monday_id):
        manual = Transaction(
            id="trans-x",
            kind=TransactionKind.REVENUE,
            date=MONDAY,
            description="Venda avulsa",
            category=SALES_CATEGORY,
            account=CASH_ACCOUNT,
            amount=Decimal("5"),
        )
        launched = SalesService(filled_snapshot).launch(monday_id).snapshot
        with_manual = append_postings(launched, [manual])

        retracted = SalesService(with_manual).retract(monday_id)
        assert retracted.snapshot.transactions == (manual,)

    def test_retract_without_launch(self, filled_snapshot, monday_id):
        change = SalesService(filled_snapshot).retract(monday_id)

        assert change.status is ChangeStatus.NOTHING_TO_RETRACT
        assert change.snapshot is filled_snapshot

    def test_is_launched(self, filled_snapshot, monday_id):
        launched = SalesService(filled_snapshot).launch(monday_id).snapshot
        service = SalesService(launched)

        assert service.is_launched(MONDAY)
        assert not service.is_launched(date(2024, 1, 16))
        assert service.launched_dates() == {MONDAY}


class TestRelaunch:
    def test_relaunch_reflects_edit(self, filled_snapshot, monday_id):
        launched = SalesService(filled_snapshot).launch(monday_id).snapshot
        edited = SalesService(launched).update_sale(monday_id, "cash", Decimal("250"))

        change = SalesService(edited).relaunch(monday_id)

        launch_postings = [
            t for t in change.snapshot.transactions if t.source.kind is SourceKind.SALES_LAUNCH
        ]
        assert len(change.removed) == 4
        assert len(launch_postings) == 4
        assert _revenue(launch_postings) == Decimal("850")

    def test_relaunch_of_unlaunched_day_launches(self, filled_snapshot, monday_id):
        change = SalesService(filled_snapshot).relaunch(monday_id)

        assert change.removed == ()
        assert len(change.added) == 4

    def test_relaunch_zero_total_leaves_ledger(self, filled_snapshot, monday_id):
        launched = SalesService(filled_snapshot).launch(monday_id).snapshot
        zeroed = launched
        for channel in ("cash", "pix_manual", "pix_qr_code", "credit_visa", "debit_mastercard"):
            zeroed = SalesService(zeroed).update_sale(monday_id, channel, Decimal("0"))

        with pytest.raises(ValidationError):
            SalesService(zeroed).relaunch(monday_id)
        assert len(zeroed.transactions) == 4


class TestTotals:
    def test_week_totals(self, filled_snapshot):
        totals = SalesService(filled_snapshot).week_totals(date(2024, 1, 20))

        assert totals.total == Decimal("800")
        assert totals.fee == Decimal("12.25")
        assert totals.investment == Decimal("53.775")
        assert totals.channels["credit_visa"] == Decimal("300")

    def test_payment_breakdown(self, filled_snapshot):
        service = SalesService(filled_snapshot)
        breakdown = service.payment_breakdown(service.week(MONDAY))

        assert breakdown.cash == Decimal("200")
        assert breakdown.pix == Decimal("150")
        assert breakdown.credit == Decimal("300")
        assert breakdown.debit == Decimal("150")


class TestLaunchedPostingsMovedOffTheirDay:
    @pytest.fixture
    def moved_snapshot(self, filled_snapshot, monday_id):
        """Monday launched, then every posting re-dated to Saturday."""
        snapshot = SalesService(filled_snapshot).launch(monday_id).snapshot
        for posting in [t for t in snapshot.transactions if t.source == launch_source(MONDAY)]:
            snapshot = TransactionService(snapshot).update_transaction(
                replace(posting, date=date(2024, 1, 20))
            ).snapshot
        return snapshot

    def test_still_counted_as_launched(self, moved_snapshot):
        service = SalesService(moved_snapshot)

        assert service.is_launched(MONDAY)
        assert service.launched_dates() == {MONDAY}

    def test_retract_removes_moved_postings(self, moved_snapshot, monday_id):
        change = SalesService(moved_snapshot).retract(monday_id)

        assert change.status is ChangeStatus.APPLIED
        assert len(change.removed) == 4
        assert change.snapshot.transactions == ()

    def test_relaunch_replaces_moved_postings(self, moved_snapshot, monday_id):
        change = SalesService(moved_snapshot).relaunch(monday_id)

        assert change.status is ChangeStatus.APPLIED
        assert len(change.removed) == 4
        assert len(change.added) == 4
        assert all(t.date == MONDAY for t in change.snapshot.transactions)


class TestRelaunchWithNewFees:
    def test_relaunch_uses_current_fee_rates(self, filled_snapshot, monday_id, fee_configuration):
        launched = SalesService(filled_snapshot).launch(monday_id).snapshot
        repriced = replace_fee_configuration(
            launched,
            replace(fee_configuration, credit_visa=Decimal("5"), investment_percentage=Decimal("20")),
        )

        change = SalesService(repriced).relaunch(monday_id)

        # 100 * 1% + 300 * 5% + 150 * 1.5%
        by_account = {(t.account, t.kind): t for t in change.added}
        assert by_account[(ELECTRONIC_ACCOUNT, TransactionKind.EXPENSE)].amount == Decimal("18.25")
        # (550 - 18.25) * 20%
        assert by_account[(INVESTMENT_ACCOUNT, TransactionKind.REVENUE)].amount == Decimal("106.35")
        assert by_account[(ELECTRONIC_ACCOUNT, TransactionKind.REVENUE)].amount == Decimal("493.65")
        assert _revenue(change.added) == Decimal("800")
        assert {t.amount for t in change.removed} == {
            Decimal("200"), Decimal("546.225"), Decimal("53.775"), Decimal("12.25")
        }
