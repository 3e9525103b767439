"""Cash count sheet domain service."""

import logging
from dataclasses import replace
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Optional

from ledgerbook.config import DEFAULT_CASH_COUNT
from ledgerbook.domain.entities import (
    CashCountHistoryEntry,
    CashCountItem,
    CashCountSummary,
    CashItemKind,
    Count,
    Quantity,
    Snapshot,
    Unset,
)
from ledgerbook.domain.errors import NotFoundError, ValidationError
from ledgerbook.domain.ledger import new_id

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def default_cash_count() -> tuple[CashCountItem, ...]:
    """Return the default sheet: banknotes at zero, balances not filled in."""
    return tuple(
        CashCountItem(
            id=item_id,
            label=label,
            value=value,
            kind=CashItemKind.BALANCE if is_balance else CashItemKind.NOTE,
            quantity=Unset() if is_balance else Count(ZERO),
        )
        for item_id, label, value, is_balance in DEFAULT_CASH_COUNT
    )


def summarize(items: tuple[CashCountItem, ...]) -> CashCountSummary:
    """Total banknotes and balance rows separately."""
    physical = sum((i.subtotal for i in items if i.kind is CashItemKind.NOTE), ZERO)
    balances = sum((i.subtotal for i in items if i.kind is CashItemKind.BALANCE), ZERO)
    return CashCountSummary(
        physical_cash=physical, account_balances=balances, grand_total=physical + balances
    )


class CashCountService:
    """Service for the cash count sheet and its saved history."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def require_item(self, item_id: str) -> CashCountItem:
        for item in self.snapshot.cash_count:
            if item.id == item_id:
                return item
        raise NotFoundError(f"Cash count item {item_id} not found")

    def set_quantity(self, item_id: str, quantity: Quantity) -> Snapshot:
        """Set the quantity of a row.

        Banknote rows take a whole, non-negative count; balance rows take any
        amount.

        Raises:
            NotFoundError: If the row does not exist
            ValidationError: If a banknote count is negative or fractional
        """
        item = self.require_item(item_id)
        if isinstance(quantity, Count) and item.kind is CashItemKind.NOTE:
            value = quantity.value
            if value < 0 or value != value.to_integral_value():
                raise ValidationError(
                    f"Banknote count must be a whole number of notes, got {value}"
                )
        return self._store(replace(item, quantity=quantity))

    def add_quantity(self, item_id: str, amount: Decimal) -> Snapshot:
        """Add to the current quantity of a row; an unset row starts at zero."""
        item = self.require_item(item_id)
        if amount <= 0:
            raise ValidationError(f"Quantity to add must be positive, got {amount}")
        current = ZERO if isinstance(item.quantity, Unset) else item.quantity.value
        return self.set_quantity(item_id, Count(current + amount))

    def summary(self) -> CashCountSummary:
        return summarize(self.snapshot.cash_count)

    def save_history(
        self, observation: str = "", now: Optional[datetime] = None
    ) -> tuple[Snapshot, CashCountHistoryEntry]:
        """Store the current sheet in the history and reset it.

        Returns:
            Tuple of (new snapshot, saved history entry)
        """
        if now is None:
            now = datetime.now(UTC)
        entry = CashCountHistoryEntry(
            id=new_id("hist"),
            timestamp=now,
            observation=observation.strip(),
            total_value=self.summary().grand_total,
            details=self.snapshot.cash_count,
        )
        snapshot = replace(
            self.snapshot,
            cash_count_history=(entry,) + self.snapshot.cash_count_history,
        )
        logger.info("Saved cash count of %s", entry.total_value)
        return CashCountService(snapshot).reset(), entry

    def reset(self) -> Snapshot:
        """Put every known row back to its default quantity."""
        defaults = {item.id: item.quantity for item in default_cash_count()}
        return replace(
            self.snapshot,
            cash_count=tuple(
                replace(item, quantity=defaults.get(item.id, Count(ZERO)))
                for item in self.snapshot.cash_count
            ),
        )

    def load_history(self, entry_id: str) -> Snapshot:
        """Copy a saved sheet back into the current sheet."""
        entry = self._require_entry(entry_id)
        return replace(self.snapshot, cash_count=entry.details)

    def delete_history(self, entry_id: str) -> Snapshot:
        self._require_entry(entry_id)
        return replace(
            self.snapshot,
            cash_count_history=tuple(
                e for e in self.snapshot.cash_count_history if e.id != entry_id
            ),
        )

    def filter_history(
        self,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CashCountHistoryEntry]:
        """History entries matching an observation substring and a date range."""
        needle = search.lower() if search else None
        return [
            e
            for e in self.snapshot.cash_count_history
            if (start_date is None or e.timestamp.date() >= start_date)
            and (end_date is None or e.timestamp.date() <= end_date)
            and (needle is None or needle in e.observation.lower())
        ]

    def _require_entry(self, entry_id: str) -> CashCountHistoryEntry:
        for entry in self.snapshot.cash_count_history:
            if entry.id == entry_id:
                return entry
        raise NotFoundError(f"Cash count history entry {entry_id} not found")

    def _store(self, item: CashCountItem) -> Snapshot:
        return replace(
            self.snapshot,
            cash_count=tuple(item if i.id == item.id else i for i in self.snapshot.cash_count),
        )
