"""Domain model entities for ledgerbook.

These are pure data classes representing business concepts, independent of
how the snapshot is stored. Every collection is a tuple and every entity is
frozen: engine operations build a new Snapshot instead of mutating one.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class TransactionKind(Enum):
    """Direction of a posting; the amount itself is never negative."""

    REVENUE = "revenue"
    EXPENSE = "expense"


class Frequency(Enum):
    """Recurrence period."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SourceKind(Enum):
    """Generator that produced a posting."""

    MANUAL = "manual"
    SALES_LAUNCH = "sales_launch"
    RECURRENCE = "recurrence"
    TRANSFER = "transfer"
    ADJUSTMENT = "adjustment"


class PayrollEntryKind(Enum):
    EARNING = "earning"
    DEDUCTION = "deduction"


class EmployeeStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ExpirationStatus(Enum):
    """Where a product stands relative to its expiration date."""

    EXPIRED = "expired"
    ATTENTION = "attention"
    OK = "ok"


class CashItemKind(Enum):
    """Banknote rows count notes; balance rows hold an amount directly."""

    NOTE = "note"
    BALANCE = "balance"


class ChangeStatus(Enum):
    """Outcome of an operation that may add or remove postings."""

    APPLIED = "applied"
    ALREADY_POSTED = "already_posted"
    NOTHING_TO_ADJUST = "nothing_to_adjust"
    NOTHING_TO_RETRACT = "nothing_to_retract"


@dataclass(frozen=True)
class PostingSource:
    """Provenance of a posting.

    ``ref`` identifies the generating event: the ISO sales date for a
    launch, the recurring transaction id for a recurrence, and the pair id
    shared by both legs of a transfer.
    """

    kind: SourceKind = SourceKind.MANUAL
    ref: Optional[str] = None


MANUAL_SOURCE = PostingSource()


@dataclass(frozen=True)
class Transaction:
    """Ledger posting domain entity."""

    id: str
    kind: TransactionKind
    date: date
    description: str
    category: str
    account: str
    amount: Decimal
    observation: str = ""
    supplier: str = ""
    doc_number: str = ""
    source: PostingSource = MANUAL_SOURCE

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the kind."""
        if self.kind is TransactionKind.REVENUE:
            return self.amount
        return -self.amount


@dataclass(frozen=True)
class Account:
    """Account domain entity. The name is the key postings refer to."""

    id: str
    name: str
    initial_balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class RecurringTransaction:
    """Recurring bill or income domain entity."""

    id: str
    kind: TransactionKind
    description: str
    category: str
    account: str
    amount: Decimal
    frequency: Frequency
    start_date: date
    next_due_date: date
    end_date: Optional[date] = None
    observation: str = ""
    supplier: str = ""
    doc_number: str = ""


SALES_CHANNELS: tuple[str, ...] = (
    "cash",
    "pix_manual",
    "pix_qr_code",
    "credit_mastercard",
    "credit_visa",
    "credit_elo",
    "debit_mastercard",
    "debit_visa",
    "debit_elo",
)

CREDIT_CHANNELS = ("credit_mastercard", "credit_visa", "credit_elo")
DEBIT_CHANNELS = ("debit_mastercard", "debit_visa", "debit_elo")

# Channels an acquirer charges a fee on
RATED_CHANNELS: tuple[str, ...] = CREDIT_CHANNELS + DEBIT_CHANNELS + ("pix_qr_code",)

# Everything that is not physical cash
DIGITAL_CHANNELS: tuple[str, ...] = RATED_CHANNELS + ("pix_manual",)


@dataclass(frozen=True)
class SalesRecord:
    """One day of aggregated sales, one amount per payment channel."""

    id: str
    date: date
    day_of_week: str
    cash: Decimal = Decimal("0")
    pix_manual: Decimal = Decimal("0")
    pix_qr_code: Decimal = Decimal("0")
    credit_mastercard: Decimal = Decimal("0")
    credit_visa: Decimal = Decimal("0")
    credit_elo: Decimal = Decimal("0")
    debit_mastercard: Decimal = Decimal("0")
    debit_visa: Decimal = Decimal("0")
    debit_elo: Decimal = Decimal("0")

    def channel(self, name: str) -> Decimal:
        """Return the amount recorded for a payment channel."""
        if name not in SALES_CHANNELS:
            raise KeyError(name)
        return getattr(self, name)

    @property
    def total(self) -> Decimal:
        """Sum of every channel for the day."""
        return sum((self.channel(name) for name in SALES_CHANNELS), Decimal("0"))


@dataclass(frozen=True)
class FeeConfiguration:
    """Acquirer fee rates per channel and the investment share, on a 0-100 scale."""

    credit_visa: Decimal = Decimal("0")
    credit_mastercard: Decimal = Decimal("0")
    credit_elo: Decimal = Decimal("0")
    debit_visa: Decimal = Decimal("0")
    debit_mastercard: Decimal = Decimal("0")
    debit_elo: Decimal = Decimal("0")
    pix_qr_code: Decimal = Decimal("0")
    investment_percentage: Decimal = Decimal("0")

    def rate(self, channel: str) -> Decimal:
        """Return the percentage rate for a rated channel."""
        if channel not in RATED_CHANNELS:
            raise KeyError(channel)
        return getattr(self, channel)


@dataclass(frozen=True)
class Employee:
    """Employee domain entity."""

    id: str
    name: str
    position: str
    admission_date: date
    salary: Decimal
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is EmployeeStatus.ACTIVE


@dataclass(frozen=True)
class PayrollEntry:
    """Earning or deduction for one employee in one month."""

    id: str
    employee_id: str
    employee_name: str
    description: str
    kind: PayrollEntryKind
    amount: Decimal
    month: int
    year: int


@dataclass(frozen=True)
class ExpirationProduct:
    """A stocked product tracked by its expiration date."""

    id: str
    barcode: str
    description: str
    quantity: int
    expiration_date: date


@dataclass(frozen=True)
class Count:
    """A counted quantity (notes) or an amount (balance rows)."""

    value: Decimal


@dataclass(frozen=True)
class Unset:
    """Quantity not filled in yet."""


Quantity = Union[Count, Unset]


@dataclass(frozen=True)
class CashCountItem:
    """One row of the cash-count sheet."""

    id: str
    label: str
    value: Decimal
    kind: CashItemKind = CashItemKind.NOTE
    quantity: Quantity = field(default_factory=lambda: Count(Decimal("0")))

    @property
    def subtotal(self) -> Decimal:
        """Money represented by this row; unset rows count as zero."""
        if isinstance(self.quantity, Unset):
            return Decimal("0")
        if self.kind is CashItemKind.BALANCE:
            return self.quantity.value
        return self.value * self.quantity.value


@dataclass(frozen=True)
class CashCountHistoryEntry:
    """Saved cash-count sheet."""

    id: str
    timestamp: datetime
    observation: str
    total_value: Decimal
    details: tuple[CashCountItem, ...] = ()


@dataclass(frozen=True)
class TransactionCategories:
    """User-editable category names per posting kind."""

    revenue: tuple[str, ...] = ()
    expense: tuple[str, ...] = ()

    def for_kind(self, kind: TransactionKind) -> tuple[str, ...]:
        if kind is TransactionKind.REVENUE:
            return self.revenue
        return self.expense


@dataclass(frozen=True)
class Snapshot:
    """The whole persisted state of the application."""

    sales: tuple[SalesRecord, ...] = ()
    cash_count: tuple[CashCountItem, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    cash_count_history: tuple[CashCountHistoryEntry, ...] = ()
    fee_configuration: FeeConfiguration = field(default_factory=FeeConfiguration)
    recurring_transactions: tuple[RecurringTransaction, ...] = ()
    accounts: tuple[Account, ...] = ()
    transaction_categories: TransactionCategories = field(
        default_factory=TransactionCategories
    )
    employees: tuple[Employee, ...] = ()
    payroll_entries: tuple[PayrollEntry, ...] = ()
    expiration_products: tuple[ExpirationProduct, ...] = ()


@dataclass(frozen=True)
class LedgerChange:
    """Result of an operation that adds or removes postings."""

    snapshot: Snapshot
    status: ChangeStatus = ChangeStatus.APPLIED
    added: tuple[Transaction, ...] = ()
    removed: tuple[Transaction, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


@dataclass(frozen=True)
class FeeBreakdown:
    """Fees and investment derived from one day of sales."""

    fee: Decimal
    net_digital: Decimal
    investment: Decimal


@dataclass(frozen=True)
class Payslip:
    """Payroll computation for one employee in one month."""

    employee: Employee
    base_salary: Decimal
    earnings: tuple[PayrollEntry, ...]
    manual_deductions: tuple[PayrollEntry, ...]
    gross: Decimal
    contribution: Decimal
    withholding: Decimal
    total_deductions: Decimal
    net_pay: Decimal


@dataclass(frozen=True)
class PayrollSummary:
    """All payslips of a month with their totals."""

    month: int
    year: int
    payslips: tuple[Payslip, ...]
    gross: Decimal
    deductions: Decimal
    net: Decimal


@dataclass(frozen=True)
class BalancePoint:
    """Per-date cash-flow row with the cumulative balance after that date."""

    date: date
    revenue: Decimal
    expense: Decimal
    balance: Decimal


@dataclass(frozen=True)
class DashboardTotals:
    initial_balance: Decimal
    revenue: Decimal
    expense: Decimal
    final_balance: Decimal


class ReportPeriod(Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


@dataclass(frozen=True)
class PeriodRow:
    label: str
    revenue: Decimal
    expense: Decimal
    net: Decimal
    total_net: Decimal
    cumulative_balance: Decimal


@dataclass(frozen=True)
class PeriodReport:
    """Operational results of one year grouped by period."""

    year: int
    period: ReportPeriod
    starting_balance: Decimal
    rows: tuple[PeriodRow, ...]
    revenue: Decimal
    expense: Decimal
    final_balance: Decimal


@dataclass(frozen=True)
class CashCountSummary:
    physical_cash: Decimal
    account_balances: Decimal
    grand_total: Decimal


@dataclass(frozen=True)
class InventorySummary:
    """Product counts per expiration status.

    ``next_expiration`` is the closest date that is today or later.
    """

    expired: int
    attention: int
    ok: int
    total_items: int
    next_expiration: Optional[date]
