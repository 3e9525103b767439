"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import Snapshot


class Database(ABC):
    """Abstract snapshot store for ledgerbook.

    The whole application state is loaded and saved as one document under
    a single key; a save either replaces the stored document completely or
    leaves it untouched.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def load_snapshot(self) -> Optional[Snapshot]:
        """Load the stored snapshot, or None if nothing was saved yet."""
        pass

    @abstractmethod
    def save_snapshot(self, snapshot: Snapshot) -> None:
        """Replace the stored snapshot atomically."""
        pass
