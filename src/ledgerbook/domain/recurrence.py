"""Recurring transaction domain service.

The rollforward walks each recurring obligation from its next due date up
to today, posting one transaction per elapsed occurrence. It is re-entrant:
an occurrence that already has a posting on its date (same recurrence, or
same description) is skipped but still advanced, so a second run with no
time passing changes nothing.
"""

import logging
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from ledgerbook.config import UPCOMING_WINDOW_DAYS
from ledgerbook.domain.entities import (
    ChangeStatus,
    Frequency,
    LedgerChange,
    PostingSource,
    RecurringTransaction,
    Snapshot,
    SourceKind,
    Transaction,
    TransactionKind,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    recurring_not_found,
)
from ledgerbook.domain.ledger import append_postings, new_id, require_positive_amount
from ledgerbook.utils.date_parser import advance_date, today_utc

logger = logging.getLogger(__name__)


def recurrence_source(recurring: RecurringTransaction) -> PostingSource:
    """Provenance attached to postings generated from a recurring transaction."""
    return PostingSource(kind=SourceKind.RECURRENCE, ref=recurring.id)


def is_occurrence_posted(
    transactions: Iterable[Transaction], recurring: RecurringTransaction, due: date
) -> bool:
    """Check whether an occurrence already has a posting on its date."""
    source = recurrence_source(recurring)
    return any(
        t.date == due and (t.source == source or t.description == recurring.description)
        for t in transactions
    )


def build_occurrence(
    recurring: RecurringTransaction,
    due: date,
    observation: Optional[str] = None,
    doc_number: Optional[str] = None,
) -> Transaction:
    """Build the posting for one occurrence of a recurring transaction."""
    return Transaction(
        id=f"rec-{recurring.id}-{due.isoformat()}",
        kind=recurring.kind,
        date=due,
        description=recurring.description,
        category=recurring.category,
        account=recurring.account,
        amount=recurring.amount,
        observation=recurring.observation if observation is None else observation,
        supplier=recurring.supplier,
        doc_number=recurring.doc_number if doc_number is None else doc_number,
        source=recurrence_source(recurring),
    )


def _is_within_end(recurring: RecurringTransaction, due: date) -> bool:
    return recurring.end_date is None or due <= recurring.end_date


class RecurringService:
    """Service for recurring bills and incomes."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def create(
        self,
        kind: TransactionKind,
        description: str,
        category: str,
        account: str,
        amount: Decimal,
        frequency: Frequency,
        start_date: date,
        end_date: Optional[date] = None,
        observation: str = "",
        supplier: str = "",
        doc_number: str = "",
    ) -> tuple[Snapshot, RecurringTransaction]:
        """Create a recurring transaction due first on its start date.

        Returns:
            Tuple of (new snapshot, created recurring transaction)

        Raises:
            ValidationError: If amount is not positive or end precedes start
        """
        recurring = RecurringTransaction(
            id=new_id("rec"),
            kind=kind,
            description=description,
            category=category,
            account=account,
            amount=amount,
            frequency=frequency,
            start_date=start_date,
            next_due_date=start_date,
            end_date=end_date,
            observation=observation,
            supplier=supplier,
            doc_number=doc_number,
        )
        self._validate(recurring)
        snapshot = replace(
            self.snapshot,
            recurring_transactions=self.snapshot.recurring_transactions + (recurring,),
        )
        return snapshot, recurring

    def get(self, recurring_id: str) -> Optional[RecurringTransaction]:
        for recur in self.snapshot.recurring_transactions:
            if recur.id == recurring_id:
                return recur
        return None

    def require(self, recurring_id: str) -> RecurringTransaction:
        recurring = self.get(recurring_id)
        if recurring is None:
            raise NotFoundError(recurring_not_found(recurring_id))
        return recurring

    def update(self, recurring: RecurringTransaction) -> Snapshot:
        """Replace a recurring transaction.

        The stored next due date is kept unless the new start date moved
        past it.

        Raises:
            NotFoundError: If the recurring transaction does not exist
            ValidationError: If the edited values are invalid
        """
        existing = self.require(recurring.id)
        next_due = max(existing.next_due_date, recurring.start_date)
        recurring = replace(recurring, next_due_date=next_due)
        self._validate(recurring)
        return self._store(recurring)

    def delete(self, recurring_id: str) -> Snapshot:
        """Delete a recurring transaction. Postings it generated are kept."""
        self.require(recurring_id)
        return replace(
            self.snapshot,
            recurring_transactions=tuple(
                r for r in self.snapshot.recurring_transactions if r.id != recurring_id
            ),
        )

    def list_recurring(self) -> list[RecurringTransaction]:
        return list(self.snapshot.recurring_transactions)

    def rollforward(self, today: Optional[date] = None) -> LedgerChange:
        """Post every elapsed occurrence not already posted.

        Args:
            today: Reference date, defaults to the current UTC date

        Returns:
            LedgerChange with the generated postings; due dates in the
            returned snapshot are advanced past today or the end date
        """
        if today is None:
            today = today_utc()

        postings: list[Transaction] = []
        updated: list[RecurringTransaction] = []
        for recur in self.snapshot.recurring_transactions:
            due = recur.next_due_date
            while due <= today and _is_within_end(recur, due):
                known = self.snapshot.transactions + tuple(postings)
                if is_occurrence_posted(known, recur, due):
                    logger.debug("Occurrence of %s on %s already posted", recur.id, due)
                else:
                    postings.append(build_occurrence(recur, due))
                due = advance_date(due, recur.frequency)
            updated.append(recur if due == recur.next_due_date else replace(recur, next_due_date=due))

        snapshot = replace(self.snapshot, recurring_transactions=tuple(updated))
        snapshot = append_postings(snapshot, postings)
        if postings:
            logger.info("Rollforward posted %d recurring transaction(s)", len(postings))
        return LedgerChange(snapshot=snapshot, added=tuple(postings))

    def upcoming(
        self, today: Optional[date] = None, window_days: int = UPCOMING_WINDOW_DAYS
    ) -> list[RecurringTransaction]:
        """Recurring transactions due within the window and not yet posted."""
        if today is None:
            today = today_utc()
        threshold = today + timedelta(days=window_days)

        due_soon = [
            r
            for r in self.snapshot.recurring_transactions
            if r.next_due_date <= threshold
            and _is_within_end(r, r.next_due_date)
            and not is_occurrence_posted(self.snapshot.transactions, r, r.next_due_date)
        ]
        return sorted(due_soon, key=lambda r: r.next_due_date)

    def launch_now(self, recurring_id: str) -> LedgerChange:
        """Post the current occurrence ahead of its due date and advance it.

        Expense postings are stamped with the due month: observation
        ``"<description> - MM/YYYY"`` and document number ``MMYYYY``.

        Raises:
            NotFoundError: If the recurring transaction does not exist
            ValidationError: If the recurrence already ended
        """
        recur = self.require(recurring_id)
        due = recur.next_due_date
        if not _is_within_end(recur, due):
            raise ValidationError(
                f"Recurring transaction {recurring_id} ended on {recur.end_date}"
            )

        advanced = self._store(
            replace(recur, next_due_date=advance_date(due, recur.frequency))
        )
        if is_occurrence_posted(self.snapshot.transactions, recur, due):
            return LedgerChange(snapshot=advanced, status=ChangeStatus.ALREADY_POSTED)

        observation = None
        doc_number = None
        if recur.kind is TransactionKind.EXPENSE:
            observation = f"{recur.description} - {due.month:02d}/{due.year}"
            doc_number = f"{due.month:02d}{due.year}"
        posting = build_occurrence(recur, due, observation=observation, doc_number=doc_number)
        logger.info("Launched %s for %s ahead of schedule", recur.id, due)
        return LedgerChange(snapshot=append_postings(advanced, [posting]), added=(posting,))

    def _store(self, recurring: RecurringTransaction) -> Snapshot:
        return replace(
            self.snapshot,
            recurring_transactions=tuple(
                recurring if r.id == recurring.id else r
                for r in self.snapshot.recurring_transactions
            ),
        )

    @staticmethod
    def _validate(recurring: RecurringTransaction) -> None:
        require_positive_amount(recurring.amount)
        if recurring.end_date is not None and recurring.end_date < recurring.start_date:
            raise ValidationError("End date cannot be before start date")
        if recurring.next_due_date < recurring.start_date:
            raise ValidationError("Next due date cannot be before start date")
