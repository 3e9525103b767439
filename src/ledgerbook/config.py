"""Configuration constants for ledgerbook.

Payroll bracket tables live here rather than in the payroll module so that a
change in the statutory tables is a configuration change, not a code change.
"""

import os
from decimal import Decimal
from pathlib import Path

# Persistence
SNAPSHOT_KEY = "ledgerbook-data"
DB_PATH_ENV_VAR = "LEDGERBOOK_DB_PATH"
DEFAULT_DB_DIR = ".ledgerbook"
DEFAULT_DB_FILE = "ledgerbook.db"


def default_database_path() -> str:
    """Return the database path from the environment or the home directory.

    Returns:
        Path to the SQLite database file
    """
    database_path = os.environ.get(DB_PATH_ENV_VAR)
    if database_path:
        return database_path

    db_dir = Path.home() / DEFAULT_DB_DIR
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / DEFAULT_DB_FILE)


# Payroll: pension contribution (upper bound inclusive, marginal rate)
CONTRIBUTION_BRACKETS: tuple[tuple[Decimal, Decimal], ...] = (
    (Decimal("1412.00"), Decimal("0.075")),
    (Decimal("2666.68"), Decimal("0.09")),
    (Decimal("4000.03"), Decimal("0.12")),
    (Decimal("7786.02"), Decimal("0.14")),
)
CONTRIBUTION_CAP = Decimal("908.85")

# Payroll: income tax withholding (upper bound inclusive, rate, deduction).
# A bound of None means "and above".
WITHHOLDING_BRACKETS: tuple[tuple[Decimal | None, Decimal, Decimal], ...] = (
    (Decimal("2259.20"), Decimal("0"), Decimal("0")),
    (Decimal("2826.65"), Decimal("0.075"), Decimal("169.44")),
    (Decimal("3751.05"), Decimal("0.15"), Decimal("381.44")),
    (Decimal("4664.68"), Decimal("0.225"), Decimal("662.77")),
    (None, Decimal("0.275"), Decimal("896.00")),
)

# Accounts the sales poster writes to
CASH_ACCOUNT = "Caixa Físico"
ELECTRONIC_ACCOUNT = "Stone I.P"
INVESTMENT_ACCOUNT = "Stone I.P - Investimento"
FEE_SUPPLIER = "Adquirente"

# Category names with engine meaning
SALES_CATEGORY = "Venda de Produtos"
FEE_CATEGORY = "Tarifa Adquirente"
TRANSFER_IN_CATEGORY = "Transferência de Entrada"
TRANSFER_OUT_CATEGORY = "Transferência de Saída"
ADJUSTMENT_UP_CATEGORY = "Ajuste de Saldo - Aumento"
ADJUSTMENT_DOWN_CATEGORY = "Ajuste de Saldo - Redução"
TRANSFER_CATEGORIES = frozenset({TRANSFER_IN_CATEGORY, TRANSFER_OUT_CATEGORY})

DEFAULT_ACCOUNTS: tuple[tuple[str, str], ...] = (
    ("acc-1", CASH_ACCOUNT),
    ("acc-2", "Cofre"),
    ("acc-3", ELECTRONIC_ACCOUNT),
    ("acc-4", "Mercado Pago"),
    ("acc-5", "PagBank"),
    ("acc-6", "Banco do Brasil"),
    ("acc-7", INVESTMENT_ACCOUNT),
)

DEFAULT_REVENUE_CATEGORIES: tuple[str, ...] = (
    SALES_CATEGORY,
    "Outras Receitas",
    TRANSFER_IN_CATEGORY,
    ADJUSTMENT_UP_CATEGORY,
)

DEFAULT_EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Produtos P/ Venda",
    "Fornecedores",
    "Despesa Variável",
    "Impostos",
    "Material Uso/Consumo",
    "Salários",
    "Pró-labore",
    "Despesas Fixas",
    "Juros",
    FEE_CATEGORY,
    "Doação",
    TRANSFER_OUT_CATEGORY,
    ADJUSTMENT_DOWN_CATEGORY,
)

# (id, label, face value, is balance item)
DEFAULT_CASH_COUNT: tuple[tuple[str, str, Decimal, bool], ...] = (
    ("1", "Cédula de R$ 2,00", Decimal("2"), False),
    ("2", "Cédula de R$ 5,00", Decimal("5"), False),
    ("3", "Cédula de R$ 10,00", Decimal("10"), False),
    ("4", "Cédula de R$ 20,00", Decimal("20"), False),
    ("5", "Cédula de R$ 50,00", Decimal("50"), False),
    ("6", "Cédula de R$ 100,00", Decimal("100"), False),
    ("7", "Cédula de R$ 200,00", Decimal("200"), False),
    ("8", "Saldo Conta Stone", Decimal("1"), True),
    ("9", "Saldo Cofre", Decimal("1"), True),
)

PT_BR_WEEKDAYS = (
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
    "domingo",
)

PT_BR_MONTHS = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

UPCOMING_WINDOW_DAYS = 14

# A product expiring within this many days needs attention
EXPIRATION_ATTENTION_DAYS = 30
