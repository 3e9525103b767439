"""Mapper functions to convert between domain entities and the stored document.

The snapshot is stored as one JSON document with camelCase keys, dates as
``DD/MM/YYYY`` text and money as decimal strings. Reading is tolerant of
older documents: missing collections become empty, missing singletons (and
the account list and cash sheet, which a fresh install seeds) take their
defaults, numbers may be stored as numbers or text, and postings
written before provenance existed get it inferred from their text markers
and categories.
"""

import json
import math
from datetime import UTC
from decimal import Decimal
from typing import Any, Optional

from dateutil import parser as date_parser

from ledgerbook.config import (
    ADJUSTMENT_DOWN_CATEGORY,
    ADJUSTMENT_UP_CATEGORY,
    TRANSFER_CATEGORIES,
)
from ledgerbook.domain import entities as domain
from ledgerbook.domain.cash_count import default_cash_count
from ledgerbook.domain.snapshot import default_accounts, default_categories
from ledgerbook.utils.amount_parser import to_decimal
from ledgerbook.utils.date_parser import format_date, parse_date

UNSET_MARKER = "##"
LEGACY_LAUNCH_MARKERS = ("LAN_AUT", "LANC_AUTO")

# Domain field name -> document key, for the channel-style records
SALES_KEYS = {
    "cash": "cash",
    "pix_manual": "pixManual",
    "pix_qr_code": "pixQRCode",
    "credit_mastercard": "creditMastercard",
    "credit_visa": "creditVisa",
    "credit_elo": "creditElo",
    "debit_mastercard": "debitMastercard",
    "debit_visa": "debitVisa",
    "debit_elo": "debitElo",
}

FEE_KEYS = {
    "credit_visa": "creditVisa",
    "credit_mastercard": "creditMastercard",
    "credit_elo": "creditElo",
    "debit_visa": "debitVisa",
    "debit_mastercard": "debitMastercard",
    "debit_elo": "debitElo",
    "pix_qr_code": "pixQRCode",
    "investment_percentage": "investmentPercentage",
}


def _money(value: Decimal) -> str:
    return str(value)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _list(document: dict, key: str) -> list:
    value = document.get(key)
    return value if isinstance(value, list) else []


def _optional_date(value: Any):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_date(value)


# Transactions


def infer_source(document: dict) -> domain.PostingSource:
    """Derive provenance for a posting stored without one."""
    category = _text(document.get("category"))
    description = _text(document.get("description"))
    observation = _text(document.get("observation"))
    iso_date = parse_date(document["date"]).isoformat()

    if category in TRANSFER_CATEGORIES:
        return domain.PostingSource(
            kind=domain.SourceKind.TRANSFER, ref=f"{iso_date}:{description}"
        )
    if category in (ADJUSTMENT_UP_CATEGORY, ADJUSTMENT_DOWN_CATEGORY):
        return domain.PostingSource(kind=domain.SourceKind.ADJUSTMENT)
    if any(m in observation or m in description for m in LEGACY_LAUNCH_MARKERS):
        return domain.PostingSource(kind=domain.SourceKind.SALES_LAUNCH, ref=iso_date)
    return domain.MANUAL_SOURCE


def source_to_document(source: domain.PostingSource) -> dict:
    return {"kind": source.kind.value, "ref": source.ref}


def source_to_domain(document: Any) -> Optional[domain.PostingSource]:
    if not isinstance(document, dict) or "kind" not in document:
        return None
    ref = document.get("ref")
    return domain.PostingSource(
        kind=domain.SourceKind(document["kind"]), ref=None if ref is None else str(ref)
    )


def transaction_to_document(txn: domain.Transaction) -> dict:
    """Convert domain Transaction to its stored form."""
    return {
        "id": txn.id,
        "type": txn.kind.value,
        "date": format_date(txn.date),
        "description": txn.description,
        "observation": txn.observation,
        "supplier": txn.supplier,
        "docNumber": txn.doc_number,
        "category": txn.category,
        "account": txn.account,
        "value": _money(txn.amount),
        "source": source_to_document(txn.source),
    }


def transaction_to_domain(document: dict) -> domain.Transaction:
    """Convert a stored transaction to domain Transaction entity.

    Raises:
        InvalidDate: If the stored date is malformed
    """
    source = source_to_domain(document.get("source")) or infer_source(document)
    return domain.Transaction(
        id=_text(document.get("id")),
        kind=domain.TransactionKind(document.get("type", "revenue")),
        date=parse_date(document["date"]),
        description=_text(document.get("description")),
        category=_text(document.get("category")),
        account=_text(document.get("account")),
        amount=to_decimal(document.get("value")),
        observation=_text(document.get("observation")),
        supplier=_text(document.get("supplier")),
        doc_number=_text(document.get("docNumber")),
        source=source,
    )


# Recurring transactions


def recurring_to_document(recur: domain.RecurringTransaction) -> dict:
    document = {
        "id": recur.id,
        "type": recur.kind.value,
        "description": recur.description,
        "observation": recur.observation,
        "supplier": recur.supplier,
        "docNumber": recur.doc_number,
        "category": recur.category,
        "account": recur.account,
        "value": _money(recur.amount),
        "frequency": recur.frequency.value,
        "startDate": format_date(recur.start_date),
        "nextDueDate": format_date(recur.next_due_date),
    }
    if recur.end_date is not None:
        document["endDate"] = format_date(recur.end_date)
    return document


def recurring_to_domain(document: dict) -> domain.RecurringTransaction:
    start_date = parse_date(document["startDate"])
    next_due = _optional_date(document.get("nextDueDate")) or start_date
    return domain.RecurringTransaction(
        id=_text(document.get("id")),
        kind=domain.TransactionKind(document.get("type", "expense")),
        description=_text(document.get("description")),
        category=_text(document.get("category")),
        account=_text(document.get("account")),
        amount=to_decimal(document.get("value")),
        frequency=domain.Frequency(document.get("frequency", "monthly")),
        start_date=start_date,
        next_due_date=next_due,
        end_date=_optional_date(document.get("endDate")),
        observation=_text(document.get("observation")),
        supplier=_text(document.get("supplier")),
        doc_number=_text(document.get("docNumber")),
    )


# Sales and fees


def sale_to_document(sale: domain.SalesRecord) -> dict:
    document = {
        "id": sale.id,
        "date": format_date(sale.date),
        "dayOfWeek": sale.day_of_week,
    }
    for attr, key in SALES_KEYS.items():
        document[key] = _money(getattr(sale, attr))
    return document


def sale_to_domain(document: dict) -> domain.SalesRecord:
    channels = {attr: to_decimal(document.get(key)) for attr, key in SALES_KEYS.items()}
    return domain.SalesRecord(
        id=_text(document.get("id")),
        date=parse_date(document["date"]),
        day_of_week=_text(document.get("dayOfWeek")),
        **channels,
    )


def fee_configuration_to_document(config: domain.FeeConfiguration) -> dict:
    return {key: _money(getattr(config, attr)) for attr, key in FEE_KEYS.items()}


def fee_configuration_to_domain(document: Any) -> domain.FeeConfiguration:
    if not isinstance(document, dict):
        return domain.FeeConfiguration()
    return domain.FeeConfiguration(
        **{attr: to_decimal(document.get(key)) for attr, key in FEE_KEYS.items()}
    )


# Accounts and categories


def account_to_document(account: domain.Account) -> dict:
    return {
        "id": account.id,
        "name": account.name,
        "initialBalance": _money(account.initial_balance),
    }


def account_to_domain(document: dict) -> domain.Account:
    """Convert a stored account to domain Account entity."""
    return domain.Account(
        id=_text(document.get("id")),
        name=_text(document.get("name")),
        initial_balance=to_decimal(document.get("initialBalance")),
    )


def categories_to_domain(document: Any) -> domain.TransactionCategories:
    if not isinstance(document, dict):
        return default_categories()
    return domain.TransactionCategories(
        revenue=tuple(_text(c) for c in _list(document, "revenue")),
        expense=tuple(_text(c) for c in _list(document, "expense")),
    )


# Cash count


def quantity_to_document(quantity: domain.Quantity) -> Any:
    if isinstance(quantity, domain.Unset):
        return UNSET_MARKER
    return _money(quantity.value)


def quantity_to_domain(value: Any) -> domain.Quantity:
    """Read a stored quantity; the unset marker stays unset, NaN counts as 0."""
    if isinstance(value, str) and value.strip() == UNSET_MARKER:
        return domain.Unset()
    if isinstance(value, float) and math.isnan(value):
        return domain.Count(Decimal("0"))
    if isinstance(value, str) and value.strip().lower() == "nan":
        return domain.Count(Decimal("0"))
    return domain.Count(to_decimal(value))


def cash_item_to_document(item: domain.CashCountItem) -> dict:
    return {
        "id": item.id,
        "label": item.label,
        "value": _money(item.value),
        "kind": item.kind.value,
        "quantity": quantity_to_document(item.quantity),
    }


def cash_item_to_domain(document: dict) -> domain.CashCountItem:
    label = _text(document.get("label"))
    if "kind" in document:
        kind = domain.CashItemKind(document["kind"])
    elif "Cédula" in label:
        kind = domain.CashItemKind.NOTE
    else:
        kind = domain.CashItemKind.BALANCE
    return domain.CashCountItem(
        id=_text(document.get("id")),
        label=label,
        value=to_decimal(document.get("value")),
        kind=kind,
        quantity=quantity_to_domain(document.get("quantity")),
    )


def _history_details(value: Any) -> list:
    # Older documents stored the details as a JSON string or an indexed object
    if isinstance(value, str):
        try:
            value = json.loads(value) if value.strip() else []
        except json.JSONDecodeError:
            return []
    if isinstance(value, dict):
        value = list(value.values())
    return [d for d in value if isinstance(d, dict)] if isinstance(value, list) else []


def history_to_document(entry: domain.CashCountHistoryEntry) -> dict:
    return {
        "id": entry.id,
        "date": entry.timestamp.isoformat(),
        "observation": entry.observation,
        "totalValue": _money(entry.total_value),
        "details": [cash_item_to_document(item) for item in entry.details],
    }


def history_to_domain(document: dict) -> domain.CashCountHistoryEntry:
    timestamp = date_parser.isoparse(document["date"])
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return domain.CashCountHistoryEntry(
        id=_text(document.get("id")),
        timestamp=timestamp,
        observation=_text(document.get("observation")),
        total_value=to_decimal(document.get("totalValue")),
        details=tuple(cash_item_to_domain(d) for d in _history_details(document.get("details"))),
    )


# Payroll


def employee_to_document(employee: domain.Employee) -> dict:
    return {
        "id": employee.id,
        "name": employee.name,
        "position": employee.position,
        "admissionDate": format_date(employee.admission_date),
        "salary": _money(employee.salary),
        "status": employee.status.value,
    }


def employee_to_domain(document: dict) -> domain.Employee:
    return domain.Employee(
        id=_text(document.get("id")),
        name=_text(document.get("name")),
        position=_text(document.get("position")),
        admission_date=parse_date(document["admissionDate"]),
        salary=to_decimal(document.get("salary")),
        status=domain.EmployeeStatus(document.get("status", "active")),
    )


def payroll_entry_to_document(entry: domain.PayrollEntry) -> dict:
    return {
        "id": entry.id,
        "employeeId": entry.employee_id,
        "employeeName": entry.employee_name,
        "description": entry.description,
        "type": entry.kind.value,
        "value": _money(entry.amount),
        "month": entry.month,
        "year": entry.year,
    }


def payroll_entry_to_domain(document: dict) -> domain.PayrollEntry:
    return domain.PayrollEntry(
        id=_text(document.get("id")),
        employee_id=_text(document.get("employeeId")),
        employee_name=_text(document.get("employeeName")),
        description=_text(document.get("description")),
        kind=domain.PayrollEntryKind(document.get("type", "earning")),
        amount=to_decimal(document.get("value")),
        month=int(document["month"]),
        year=int(document["year"]),
    )


# Inventory


def expiration_product_to_document(product: domain.ExpirationProduct) -> dict:
    return {
        "id": product.id,
        "barcode": product.barcode,
        "description": product.description,
        "quantity": product.quantity,
        "expirationDate": format_date(product.expiration_date),
    }


def expiration_product_to_domain(document: dict) -> domain.ExpirationProduct:
    return domain.ExpirationProduct(
        id=_text(document.get("id")),
        barcode=_text(document.get("barcode")),
        description=_text(document.get("description")),
        quantity=int(to_decimal(document.get("quantity"))),
        expiration_date=parse_date(document["expirationDate"]),
    )


# Snapshot


def snapshot_to_document(snapshot: domain.Snapshot) -> dict:
    """Convert a Snapshot to the stored document."""
    return {
        "sales": [sale_to_document(s) for s in snapshot.sales],
        "cashCount": [cash_item_to_document(i) for i in snapshot.cash_count],
        "transactions": [transaction_to_document(t) for t in snapshot.transactions],
        "cashCountHistory": [history_to_document(h) for h in snapshot.cash_count_history],
        "feeConfiguration": fee_configuration_to_document(snapshot.fee_configuration),
        "recurringTransactions": [
            recurring_to_document(r) for r in snapshot.recurring_transactions
        ],
        "accounts": [account_to_document(a) for a in snapshot.accounts],
        "transactionCategories": {
            "revenue": list(snapshot.transaction_categories.revenue),
            "expense": list(snapshot.transaction_categories.expense),
        },
        "employees": [employee_to_document(e) for e in snapshot.employees],
        "payrollEntries": [payroll_entry_to_document(p) for p in snapshot.payroll_entries],
        "expirationProducts": [
            expiration_product_to_document(p) for p in snapshot.expiration_products
        ],
    }


def snapshot_to_domain(document: dict) -> domain.Snapshot:
    """Convert a stored document to a Snapshot.

    Raises:
        InvalidDate: If any stored date is malformed
    """
    return domain.Snapshot(
        sales=tuple(sale_to_domain(d) for d in _list(document, "sales")),
        cash_count=(
            tuple(cash_item_to_domain(d) for d in _list(document, "cashCount"))
            if "cashCount" in document
            else default_cash_count()
        ),
        transactions=tuple(
            transaction_to_domain(d) for d in _list(document, "transactions")
        ),
        cash_count_history=tuple(
            history_to_domain(d) for d in _list(document, "cashCountHistory")
        ),
        fee_configuration=fee_configuration_to_domain(document.get("feeConfiguration")),
        recurring_transactions=tuple(
            recurring_to_domain(d) for d in _list(document, "recurringTransactions")
        ),
        accounts=(
            tuple(account_to_domain(d) for d in _list(document, "accounts"))
            if "accounts" in document
            else default_accounts()
        ),
        transaction_categories=categories_to_domain(document.get("transactionCategories")),
        employees=tuple(employee_to_domain(d) for d in _list(document, "employees")),
        payroll_entries=tuple(
            payroll_entry_to_domain(d) for d in _list(document, "payrollEntries")
        ),
        expiration_products=tuple(
            expiration_product_to_domain(d) for d in _list(document, "expirationProducts")
        ),
    )


def dumps(snapshot: domain.Snapshot) -> str:
    return json.dumps(snapshot_to_document(snapshot), ensure_ascii=False)


def loads(payload: str) -> domain.Snapshot:
    return snapshot_to_domain(json.loads(payload))
