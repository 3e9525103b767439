"""Transfers between accounts."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerbook.config import TRANSFER_IN_CATEGORY, TRANSFER_OUT_CATEGORY
from ledgerbook.domain.balance import account_balance
from ledgerbook.domain.entities import (
    LedgerChange,
    PostingSource,
    Snapshot,
    SourceKind,
    Transaction,
    TransactionKind,
)
from ledgerbook.domain.errors import InsufficientFunds, ValidationError
from ledgerbook.domain.ledger import append_postings, new_id, require_positive_amount

logger = logging.getLogger(__name__)

TRANSFER_SUPPLIER = "Transferência"


class TransferService:
    """Moves money between two accounts as a linked pair of postings."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def transfer(
        self,
        source: str,
        destination: str,
        amount: Decimal,
        transfer_date: date,
        description: Optional[str] = None,
    ) -> LedgerChange:
        """Transfer an amount from one account to another.

        Emits an expense on the source and a revenue on the destination,
        both tagged with one transfer provenance. On any failure the
        snapshot is left untouched.

        Args:
            source: Name of the account to debit
            destination: Name of the account to credit
            amount: Amount to move, must be positive
            transfer_date: Date of both postings
            description: Optional description, derived from the names if empty

        Returns:
            LedgerChange with the two postings

        Raises:
            ValidationError: If the accounts are the same or amount <= 0
            NotFoundError: If either account does not exist
            InsufficientFunds: If the source balance is below the amount
        """
        require_positive_amount(amount)
        if source == destination:
            raise ValidationError("Source and destination accounts must be different")

        balance = account_balance(self.snapshot, source)
        # Raises NotFoundError for an unknown destination
        account_balance(self.snapshot, destination)
        if balance < amount:
            raise InsufficientFunds(source, balance, amount)

        if not description or not description.strip():
            description = f"Transferência de {source} para {destination}"

        pair = PostingSource(kind=SourceKind.TRANSFER, ref=new_id("tr"))
        outgoing = Transaction(
            id=new_id("trans-out"),
            kind=TransactionKind.EXPENSE,
            date=transfer_date,
            description=description,
            category=TRANSFER_OUT_CATEGORY,
            account=source,
            amount=amount,
            observation=f"Para: {destination}",
            supplier=TRANSFER_SUPPLIER,
            source=pair,
        )
        incoming = Transaction(
            id=new_id("trans-in"),
            kind=TransactionKind.REVENUE,
            date=transfer_date,
            description=description,
            category=TRANSFER_IN_CATEGORY,
            account=destination,
            amount=amount,
            observation=f"De: {source}",
            supplier=TRANSFER_SUPPLIER,
            source=pair,
        )

        logger.info("Transferred %s from %s to %s", amount, source, destination)
        return LedgerChange(
            snapshot=append_postings(self.snapshot, [outgoing, incoming]),
            added=(outgoing, incoming),
        )
