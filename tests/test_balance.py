"""Tests for balance derivation and ledger helpers."""

import random
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.domain.balance import (
    account_balance,
    account_balances,
    chronological,
    total_initial_balance,
)
from ledgerbook.domain.entities import PostingSource, SourceKind, Transaction, TransactionKind
from ledgerbook.domain.errors import NotFoundError, ValidationError
from ledgerbook.domain.ledger import (
    append_postings,
    find_by_source,
    next_doc_number,
    remove_postings,
    require_positive_amount,
)


def _txn(
    txn_id, kind, amount, account="Caixa Físico", day=date(2024, 1, 10),
    category="Outras Receitas", **kwargs
):
    return Transaction(
        id=txn_id,
        kind=kind,
        date=day,
        description=f"Lançamento {txn_id}",
        category=category,
        account=account,
        amount=Decimal(amount),
        **kwargs,
    )


@pytest.fixture
def ledger_snapshot(empty_snapshot):
    return append_postings(
        empty_snapshot,
        [
            _txn("t1", TransactionKind.REVENUE, "50", day=date(2024, 1, 5)),
            _txn("t2", TransactionKind.EXPENSE, "30.10", day=date(2024, 1, 7)),
            _txn("t3", TransactionKind.REVENUE, "20", account="Cofre", day=date(2024, 1, 6)),
            _txn("t4", TransactionKind.EXPENSE, "5", account="Conta Antiga", day=date(2024, 1, 8)),
        ],
    )


def test_balance_folds_initial_and_postings(ledger_snapshot):
    assert account_balance(ledger_snapshot, "Caixa Físico") == Decimal("119.90")
    assert account_balance(ledger_snapshot, "Cofre") == Decimal("20")


def test_balance_is_order_invariant(ledger_snapshot):
    shuffled = list(ledger_snapshot.transactions)
    random.Random(7).shuffle(shuffled)
    reordered = replace(ledger_snapshot, transactions=tuple(reversed(shuffled)))

    assert account_balances(reordered) == account_balances(ledger_snapshot)


def test_dangling_account_is_ignored(ledger_snapshot):
    balances = account_balances(ledger_snapshot)

    assert "Conta Antiga" not in balances
    assert sum(balances.values()) == Decimal("139.90")


def test_unknown_account_balance(ledger_snapshot):
    with pytest.raises(NotFoundError):
        account_balance(ledger_snapshot, "Conta Antiga")


def test_total_initial_balance(empty_snapshot):
    assert total_initial_balance(empty_snapshot) == Decimal("100")


def test_append_sorts_descending(ledger_snapshot):
    dates = [t.date for t in ledger_snapshot.transactions]
    assert dates == sorted(dates, reverse=True)


def test_same_day_postings_keep_insertion_order(empty_snapshot):
    first = _txn("a", TransactionKind.REVENUE, "1")
    second = _txn("b", TransactionKind.REVENUE, "2")

    snapshot = append_postings(empty_snapshot, [first, second])

    assert [t.id for t in snapshot.transactions] == ["a", "b"]
    assert [t.id for t in chronological(snapshot.transactions)] == ["a", "b"]


def test_append_nothing_returns_same_snapshot(empty_snapshot):
    assert append_postings(empty_snapshot, []) is empty_snapshot


def test_remove_postings(ledger_snapshot):
    snapshot, removed = remove_postings(ledger_snapshot, lambda t: t.account == "Cofre")

    assert [t.id for t in removed] == ["t3"]
    assert all(t.account != "Cofre" for t in snapshot.transactions)


def test_find_by_source(empty_snapshot):
    source = PostingSource(kind=SourceKind.TRANSFER, ref="tr-1")
    snapshot = append_postings(
        empty_snapshot,
        [_txn("x", TransactionKind.REVENUE, "1", source=source), _txn("y", TransactionKind.REVENUE, "1")],
    )

    assert [t.id for t in find_by_source(snapshot.transactions, source)] == ["x"]


def test_next_doc_number():
    transactions = [
        _txn("a", TransactionKind.REVENUE, "1", doc_number="7"),
        _txn("b", TransactionKind.REVENUE, "1", doc_number="NF-99"),
        _txn("c", TransactionKind.EXPENSE, "1", doc_number="3", category="Tarifa Adquirente"),
    ]

    assert next_doc_number(transactions) == "8"
    assert next_doc_number(transactions, category="Tarifa Adquirente") == "4"
    assert next_doc_number([]) == "1"


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1"), Decimal("NaN")])
def test_require_positive_amount(amount):
    with pytest.raises(ValidationError):
        require_positive_amount(amount)
