"""Transaction domain service."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerbook.domain.entities import (
    LedgerChange,
    Snapshot,
    Transaction,
    TransactionKind,
)
from ledgerbook.domain.errors import NotFoundError, transaction_not_found
from ledgerbook.domain.ledger import (
    append_postings,
    new_id,
    remove_postings,
    require_positive_amount,
    sort_postings,
)

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for manually managed postings."""

    def __init__(self, snapshot: Snapshot):
        """Initialize transaction service.

        Args:
            snapshot: Snapshot to operate on; never mutated
        """
        self.snapshot = snapshot

    def create_transaction(
        self,
        kind: TransactionKind,
        date: date,
        description: str,
        category: str,
        account: str,
        amount: Decimal,
        observation: str = "",
        supplier: str = "",
        doc_number: str = "",
    ) -> LedgerChange:
        """Create a manual posting.

        Args:
            kind: Revenue or expense
            date: Posting date
            description: Description
            category: Category name
            account: Account name
            amount: Positive amount
            observation: Optional observation
            supplier: Optional supplier
            doc_number: Optional document number

        Returns:
            LedgerChange holding the new snapshot and the created posting

        Raises:
            ValidationError: If amount is not positive
        """
        require_positive_amount(amount)
        txn = Transaction(
            id=new_id("trans"),
            kind=kind,
            date=date,
            description=description,
            category=category,
            account=account,
            amount=amount,
            observation=observation,
            supplier=supplier,
            doc_number=doc_number,
        )
        logger.info("Created %s posting %s on %s", kind.value, txn.id, account)
        return LedgerChange(
            snapshot=append_postings(self.snapshot, [txn]), added=(txn,)
        )

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get posting by ID.

        Returns:
            Transaction entity or None if not found
        """
        for txn in self.snapshot.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def update_transaction(self, transaction: Transaction) -> LedgerChange:
        """Replace a posting with an edited version carrying the same ID.

        Edits are full replacements; the posting keeps its provenance.

        Raises:
            NotFoundError: If no posting has that ID
            ValidationError: If amount is not positive
        """
        existing = self.get_transaction(transaction.id)
        if existing is None:
            raise NotFoundError(transaction_not_found(transaction.id))
        require_positive_amount(transaction.amount)

        edited = replace(transaction, source=existing.source)
        transactions = tuple(
            edited if t.id == transaction.id else t
            for t in self.snapshot.transactions
        )
        return LedgerChange(
            snapshot=replace(self.snapshot, transactions=sort_postings(transactions)),
            added=(edited,),
            removed=(existing,),
        )

    def delete_transaction(self, transaction_id: str) -> LedgerChange:
        """Delete a posting.

        Raises:
            NotFoundError: If no posting has that ID
        """
        snapshot, removed = remove_postings(
            self.snapshot, lambda t: t.id == transaction_id
        )
        if not removed:
            raise NotFoundError(transaction_not_found(transaction_id))
        logger.info("Deleted posting %s", transaction_id)
        return LedgerChange(snapshot=snapshot, removed=removed)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account: Optional[str] = None,
        kind: Optional[TransactionKind] = None,
        category: Optional[str] = None,
    ) -> list[Transaction]:
        """List postings with filters, most recent first.

        Args:
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            account: Optional account name
            kind: Optional revenue/expense filter
            category: Optional category name

        Returns:
            List of transaction entities
        """
        results = []
        for txn in self.snapshot.transactions:
            if start_date is not None and txn.date < start_date:
                continue
            if end_date is not None and txn.date > end_date:
                continue
            if account is not None and txn.account != account:
                continue
            if kind is not None and txn.kind is not kind:
                continue
            if category is not None and txn.category != category:
                continue
            results.append(txn)
        return results
