"""Snapshot construction and wholesale replacement.

Imports always replace a whole collection or singleton, never merge, so
these setters are the only way bulk data enters a snapshot.
"""

from dataclasses import fields, replace
from datetime import date
from typing import Iterable

from ledgerbook.config import (
    DEFAULT_ACCOUNTS,
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_REVENUE_CATEGORIES,
)
from ledgerbook.domain.cash_count import default_cash_count
from ledgerbook.domain.entities import (
    Account,
    FeeConfiguration,
    Snapshot,
    TransactionCategories,
)
from ledgerbook.domain.ledger import sort_postings
from ledgerbook.domain.sales import SalesService

COLLECTIONS = frozenset(
    f.name
    for f in fields(Snapshot)
    if f.name not in ("fee_configuration", "transaction_categories")
)


def default_categories() -> TransactionCategories:
    return TransactionCategories(
        revenue=DEFAULT_REVENUE_CATEGORIES, expense=DEFAULT_EXPENSE_CATEGORIES
    )


def default_accounts() -> tuple[Account, ...]:
    return tuple(Account(id=acc_id, name=name) for acc_id, name in DEFAULT_ACCOUNTS)


def initial_snapshot(today: date) -> Snapshot:
    """Build the state of a fresh install.

    Default accounts, categories and cash sheet, plus an empty sales week
    around ``today``.
    """
    snapshot = Snapshot(
        cash_count=default_cash_count(),
        accounts=default_accounts(),
        transaction_categories=default_categories(),
    )
    snapshot, _ = SalesService(snapshot).create_week(today)
    return snapshot


def replace_collection(snapshot: Snapshot, name: str, items: Iterable) -> Snapshot:
    """Replace one collection of the snapshot as a whole.

    Raises:
        KeyError: If name is not a snapshot collection
    """
    if name not in COLLECTIONS:
        raise KeyError(name)
    items = tuple(items)
    if name == "transactions":
        items = sort_postings(items)
    elif name == "sales":
        items = tuple(sorted(items, key=lambda s: s.date))
    return replace(snapshot, **{name: items})


def replace_fee_configuration(snapshot: Snapshot, config: FeeConfiguration) -> Snapshot:
    return replace(snapshot, fee_configuration=config)


def replace_categories(snapshot: Snapshot, categories: TransactionCategories) -> Snapshot:
    return replace(snapshot, transaction_categories=categories)
