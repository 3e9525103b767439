"""Account balance derivation.

Balances are never cached: each query folds the whole ledger over the
accounts' initial balances. The fold is a plain sum, so the stored order of
postings does not matter.
"""

from decimal import Decimal
from typing import Iterable

from ledgerbook.domain.entities import Snapshot, Transaction
from ledgerbook.domain.errors import NotFoundError, account_not_found


def account_balances(snapshot: Snapshot) -> dict[str, Decimal]:
    """Return the current balance of every account, keyed by account name.

    Postings referring to an account that no longer exists are skipped.
    """
    balances = {acc.name: acc.initial_balance for acc in snapshot.accounts}
    for txn in snapshot.transactions:
        if txn.account in balances:
            balances[txn.account] += txn.signed_amount
    return balances


def account_balance(snapshot: Snapshot, account_name: str) -> Decimal:
    """Return the current balance of one account.

    Raises:
        NotFoundError: If the account does not exist
    """
    for acc in snapshot.accounts:
        if acc.name == account_name:
            return acc.initial_balance + sum(
                (t.signed_amount for t in snapshot.transactions if t.account == account_name),
                Decimal("0"),
            )
    raise NotFoundError(account_not_found(account_name))


def total_initial_balance(snapshot: Snapshot) -> Decimal:
    """Sum of the initial balances of all accounts."""
    return sum((acc.initial_balance for acc in snapshot.accounts), Decimal("0"))


def chronological(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort postings by ascending date, same-day postings keep their order."""
    return sorted(transactions, key=lambda t: t.date)
