"""Domain layer for ledgerbook application."""

# Services are imported lazily: utils depends on domain.entities and the
# services depend on utils.
_SERVICES = {
    "AccountService": "ledgerbook.domain.account",
    "AdjustmentService": "ledgerbook.domain.adjustment",
    "CashCountService": "ledgerbook.domain.cash_count",
    "CategoryService": "ledgerbook.domain.category",
    "EmployeeService": "ledgerbook.domain.employee",
    "InventoryService": "ledgerbook.domain.inventory",
    "PayrollService": "ledgerbook.domain.payroll",
    "RecurringService": "ledgerbook.domain.recurrence",
    "SalesService": "ledgerbook.domain.sales",
    "SummaryService": "ledgerbook.domain.summary",
    "TransactionService": "ledgerbook.domain.transaction",
    "TransferService": "ledgerbook.domain.transfer",
}

__all__ = sorted(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
