"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidDate(ValidationError):
    """Date text that does not decompose into a calendar date."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InsufficientFunds(DomainError):
    """Source account balance does not cover a transfer."""

    def __init__(self, account: str, balance: Decimal, requested: Decimal):
        self.account = account
        self.balance = balance
        self.requested = requested
        super().__init__(insufficient_funds(account, balance, requested))


def account_not_found(name: str) -> str:
    """Return message for missing account."""
    return f"Account '{name}' not found"


def duplicate_account_name(name: str) -> str:
    """Return message for an account name already in use."""
    return f"Account with name '{name}' already exists"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def recurring_not_found(recurring_id: str) -> str:
    """Return message for missing recurring transaction."""
    return f"Recurring transaction {recurring_id} not found"


def sale_not_found(sale_id: str) -> str:
    """Return message for missing sales record."""
    return f"Sales record {sale_id} not found"


def employee_not_found(employee_id: str) -> str:
    """Return message for missing employee."""
    return f"Employee {employee_id} not found"


def non_positive_amount(amount: Decimal) -> str:
    """Return message for amounts that must be greater than zero."""
    return f"Amount must be greater than zero, got {amount}"


def insufficient_funds(account: str, balance: Decimal, requested: Decimal) -> str:
    """Return message when a transfer exceeds the source balance."""
    return (
        f"Insufficient funds in '{account}': balance {balance:,.2f}, "
        f"requested {requested:,.2f}"
    )
