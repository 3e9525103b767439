"""Utility for resolving account names and IDs to accounts."""

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import Account
from ledgerbook.domain.errors import NotFoundError, account_not_found


def resolve_account(account_service: AccountService, account: str) -> Account:
    """Resolve an account ID or name to the account.

    Args:
        account_service: AccountService instance
        account: Account ID (e.g. "acc-3") or name; names are matched exactly
            first, then ignoring case when that is unambiguous

    Returns:
        Account entity

    Raises:
        NotFoundError: If account is not found
    """
    by_id = account_service.get_account(account)
    if by_id is not None:
        return by_id

    by_name = account_service.get_account_by_name(account)
    if by_name is not None:
        return by_name

    lowered = account.strip().lower()
    matches = [a for a in account_service.list_accounts() if a.name.lower() == lowered]
    if len(matches) == 1:
        return matches[0]

    raise NotFoundError(account_not_found(account))
