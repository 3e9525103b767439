"""Account domain service."""

from dataclasses import replace
from decimal import Decimal
from typing import Optional

from ledgerbook.domain.balance import account_balances
from ledgerbook.domain.entities import Account as AccountEntity
from ledgerbook.domain.entities import Snapshot
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_name,
)
from ledgerbook.domain.ledger import new_id


class AccountService:
    """Service for managing accounts."""

    def __init__(self, snapshot: Snapshot):
        """Initialize account service.

        Args:
            snapshot: Current application state
        """
        self.snapshot = snapshot

    def create_account(
        self, name: str, initial_balance: Decimal = Decimal("0")
    ) -> tuple[Snapshot, AccountEntity]:
        """Create a new account.

        Args:
            name: Account name, referenced by postings
            initial_balance: Opening balance

        Returns:
            Tuple of (new snapshot, created account)

        Raises:
            ValidationError: If the name is empty
            ConflictError: If account name already exists
        """
        name = self._clean_name(name)
        self._check_unique(name)

        account = AccountEntity(
            id=new_id("acc"), name=name, initial_balance=initial_balance
        )
        return replace(self.snapshot, accounts=self.snapshot.accounts + (account,)), account

    def get_account(self, account_id: str) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        for acc in self.snapshot.accounts:
            if acc.id == account_id:
                return acc
        return None

    def get_account_by_name(self, name: str) -> Optional[AccountEntity]:
        for acc in self.snapshot.accounts:
            if acc.name == name:
                return acc
        return None

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return list(self.snapshot.accounts)

    def balances(self) -> dict[str, Decimal]:
        """Current balance of every account keyed by name."""
        return account_balances(self.snapshot)

    def edit_account(
        self,
        account_id: str,
        name: Optional[str] = None,
        initial_balance: Optional[Decimal] = None,
    ) -> Snapshot:
        """Rename an account or change its opening balance.

        A new name is carried over to every posting and recurring
        transaction that referred to the old one.

        Args:
            account_id: Account ID to edit
            name: Optional new name (if None, name is not updated)
            initial_balance: Optional new opening balance

        Raises:
            NotFoundError: If account not found
            ConflictError: If the new name already exists
        """
        account = self.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        new_name = account.name
        if name is not None:
            new_name = self._clean_name(name)
            self._check_unique(new_name, exclude_id=account_id)

        updated = replace(
            account,
            name=new_name,
            initial_balance=(
                account.initial_balance if initial_balance is None else initial_balance
            ),
        )
        snapshot = replace(
            self.snapshot,
            accounts=tuple(updated if a.id == account_id else a for a in self.snapshot.accounts),
        )
        if new_name == account.name:
            return snapshot

        old_name = account.name
        return replace(
            snapshot,
            transactions=tuple(
                replace(t, account=new_name) if t.account == old_name else t
                for t in snapshot.transactions
            ),
            recurring_transactions=tuple(
                replace(r, account=new_name) if r.account == old_name else r
                for r in snapshot.recurring_transactions
            ),
        )

    def delete_account(self, account_id: str) -> Snapshot:
        """Delete an account.

        Postings that refer to it are kept and simply stop counting towards
        any balance.

        Raises:
            NotFoundError: If account not found
        """
        if self.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        return replace(
            self.snapshot,
            accounts=tuple(a for a in self.snapshot.accounts if a.id != account_id),
        )

    def _check_unique(self, name: str, exclude_id: Optional[str] = None) -> None:
        for acc in self.snapshot.accounts:
            if acc.id != exclude_id and acc.name == name:
                raise ConflictError(duplicate_account_name(name))

    @staticmethod
    def _clean_name(name: str) -> str:
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        return name
