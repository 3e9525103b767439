"""Append, remove and query helpers over the ledger of a snapshot.

Every generator (sales, recurrence, transfers, adjustments, manual entry)
goes through these helpers so the ledger keeps one ordering rule: most
recent date first, ties kept in insertion order.
"""

import uuid
from decimal import Decimal
from dataclasses import replace
from typing import Callable, Iterable, Optional

from ledgerbook.domain.entities import PostingSource, Snapshot, Transaction
from ledgerbook.domain.errors import ValidationError, non_positive_amount


def new_id(prefix: str) -> str:
    """Return a fresh identifier such as ``trans-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex}"


def sort_postings(transactions: Iterable[Transaction]) -> tuple[Transaction, ...]:
    """Sort postings by descending date, keeping the order of same-day postings."""
    return tuple(sorted(transactions, key=lambda t: t.date, reverse=True))


def append_postings(snapshot: Snapshot, postings: Iterable[Transaction]) -> Snapshot:
    """Return a snapshot with the postings added as one batch."""
    postings = tuple(postings)
    if not postings:
        return snapshot
    return replace(
        snapshot, transactions=sort_postings(snapshot.transactions + postings)
    )


def remove_postings(
    snapshot: Snapshot, predicate: Callable[[Transaction], bool]
) -> tuple[Snapshot, tuple[Transaction, ...]]:
    """Remove every posting matching the predicate.

    Returns:
        Tuple of (new snapshot, removed postings)
    """
    kept = []
    removed = []
    for txn in snapshot.transactions:
        if predicate(txn):
            removed.append(txn)
        else:
            kept.append(txn)
    if not removed:
        return snapshot, ()
    return replace(snapshot, transactions=tuple(kept)), tuple(removed)


def find_by_source(
    transactions: Iterable[Transaction], source: PostingSource
) -> tuple[Transaction, ...]:
    """Return postings produced by the given generator event."""
    return tuple(t for t in transactions if t.source == source)


def next_doc_number(
    transactions: Iterable[Transaction], category: Optional[str] = None
) -> str:
    """Return the highest numeric document number plus one.

    Non-numeric document numbers are ignored. When ``category`` is given
    only postings of that category are considered.
    """
    highest = 0
    for txn in transactions:
        if category is not None and txn.category != category:
            continue
        doc = txn.doc_number.strip()
        if doc.isdigit():
            highest = max(highest, int(doc))
    return str(highest + 1)


def require_positive_amount(amount: Decimal) -> Decimal:
    """Return the amount, or raise if it is not strictly positive.

    Raises:
        ValidationError: If amount <= 0
    """
    if not isinstance(amount, Decimal) or not amount.is_finite() or amount <= 0:
        raise ValidationError(non_positive_amount(amount))
    return amount
