"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError, replace
from datetime import date
from decimal import Decimal

from ledgerbook.domain.entities import (
    Account,
    CashCountItem,
    CashItemKind,
    Count,
    Employee,
    EmployeeStatus,
    FeeConfiguration,
    LedgerChange,
    SalesRecord,
    Snapshot,
    Transaction,
    TransactionCategories,
    TransactionKind,
    Unset,
)


class TestTransaction:
    """Tests for Transaction entity."""

    def _transaction(self, kind):
        return Transaction(
            id="trans-1",
            kind=kind,
            date=date(2024, 1, 15),
            description="Teste",
            category="Outras Receitas",
            account="Cofre",
            amount=Decimal("12.50"),
        )

    def test_signed_amount(self):
        assert self._transaction(TransactionKind.REVENUE).signed_amount == Decimal("12.50")
        assert self._transaction(TransactionKind.EXPENSE).signed_amount == Decimal("-12.50")

    def test_immutability(self):
        txn = self._transaction(TransactionKind.REVENUE)
        with pytest.raises(FrozenInstanceError):
            txn.amount = Decimal("1")

    def test_defaults(self):
        txn = self._transaction(TransactionKind.EXPENSE)
        assert txn.observation == ""
        assert txn.source.ref is None


class TestSalesRecord:
    """Tests for SalesRecord entity."""

    def test_total(self, sample_sale):
        assert sample_sale.total == Decimal("800")

    def test_channel(self, sample_sale):
        assert sample_sale.channel("credit_visa") == Decimal("300")
        with pytest.raises(KeyError):
            sample_sale.channel("cheque")

    def test_empty_day(self):
        sale = SalesRecord(id="s", date=date(2024, 1, 15), day_of_week="segunda-feira")
        assert sale.total == 0


def test_fee_rate(fee_configuration):
    assert fee_configuration.rate("credit_elo") == Decimal("4")
    # Manual pix has no acquirer
    with pytest.raises(KeyError):
        FeeConfiguration().rate("pix_manual")


def test_cash_item_subtotal():
    note = CashCountItem(id="1", label="Cédula de R$ 2,00", value=Decimal("2"), quantity=Count(Decimal("7")))
    balance = CashCountItem(
        id="8", label="Saldo", value=Decimal("1"), kind=CashItemKind.BALANCE, quantity=Count(Decimal("99.90"))
    )
    unset = CashCountItem(id="9", label="Saldo", value=Decimal("1"), kind=CashItemKind.BALANCE, quantity=Unset())

    assert note.subtotal == Decimal("14")
    assert balance.subtotal == Decimal("99.90")
    assert unset.subtotal == 0


def test_employee_is_active():
    employee = Employee(
        id="emp-1", name="Ana", position="Caixa", admission_date=date(2023, 1, 2), salary=Decimal("1500")
    )
    assert employee.is_active
    assert not replace(employee, status=EmployeeStatus.INACTIVE).is_active


def test_categories_for_kind():
    categories = TransactionCategories(revenue=("A",), expense=("B",))
    assert categories.for_kind(TransactionKind.REVENUE) == ("A",)
    assert categories.for_kind(TransactionKind.EXPENSE) == ("B",)


def test_ledger_change_changed():
    snapshot = Snapshot(accounts=(Account(id="acc-1", name="Cofre"),))
    assert not LedgerChange(snapshot=snapshot).changed
