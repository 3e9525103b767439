"""Category domain service.

Categories are plain names kept per posting kind. Postings store the name
itself, so a rename is applied to every posting of the same kind.
"""

from dataclasses import replace

from ledgerbook.domain.entities import Snapshot, TransactionCategories, TransactionKind
from ledgerbook.domain.errors import ConflictError, NotFoundError, ValidationError


class CategoryService:
    """Service for managing categories."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def list_categories(self, kind: TransactionKind) -> list[str]:
        return list(self.snapshot.transaction_categories.for_kind(kind))

    def add_category(self, kind: TransactionKind, name: str) -> Snapshot:
        """Add a category.

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the name exists, ignoring case
        """
        name = self._clean_name(name)
        current = self.snapshot.transaction_categories.for_kind(kind)
        self._check_unique(current, name)
        return self._store(kind, sorted(current + (name,)))

    def rename_category(self, kind: TransactionKind, old_name: str, new_name: str) -> Snapshot:
        """Rename a category and the postings of the same kind using it.

        Raises:
            NotFoundError: If old_name is not a category of this kind
            ValidationError: If the new name is empty
            ConflictError: If the new name exists, ignoring case
        """
        new_name = self._clean_name(new_name)
        current = self.snapshot.transaction_categories.for_kind(kind)
        if old_name not in current:
            raise NotFoundError(f"Category '{old_name}' not found")
        if new_name == old_name:
            return self.snapshot
        self._check_unique([c for c in current if c != old_name], new_name)

        snapshot = self._store(
            kind, sorted(new_name if c == old_name else c for c in current)
        )
        return replace(
            snapshot,
            transactions=tuple(
                replace(t, category=new_name)
                if t.kind is kind and t.category == old_name
                else t
                for t in snapshot.transactions
            ),
        )

    def delete_category(self, kind: TransactionKind, name: str) -> Snapshot:
        """Delete a category. Postings using it keep the name."""
        current = self.snapshot.transaction_categories.for_kind(kind)
        if name not in current:
            raise NotFoundError(f"Category '{name}' not found")
        return self._store(kind, [c for c in current if c != name])

    def _store(self, kind: TransactionKind, names) -> Snapshot:
        categories = self.snapshot.transaction_categories
        if kind is TransactionKind.REVENUE:
            categories = TransactionCategories(revenue=tuple(names), expense=categories.expense)
        else:
            categories = TransactionCategories(revenue=categories.revenue, expense=tuple(names))
        return replace(self.snapshot, transaction_categories=categories)

    @staticmethod
    def _check_unique(existing, name: str) -> None:
        lowered = name.lower()
        if any(c.lower() == lowered for c in existing):
            raise ConflictError(f"Category '{name}' already exists")

    @staticmethod
    def _clean_name(name: str) -> str:
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        return name
