"""Shared pytest fixtures for ledgerbook tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.entities import (
    Account,
    FeeConfiguration,
    SalesRecord,
    Snapshot,
)
from ledgerbook.domain.snapshot import default_categories, initial_snapshot


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def empty_snapshot():
    """Snapshot with two accounts and nothing posted."""
    return Snapshot(
        accounts=(
            Account(id="acc-1", name="Caixa Físico", initial_balance=Decimal("100")),
            Account(id="acc-2", name="Cofre"),
        ),
        transaction_categories=default_categories(),
    )


@pytest.fixture
def default_snapshot():
    """Snapshot of a fresh install on 15/01/2024."""
    return initial_snapshot(date(2024, 1, 15))


@pytest.fixture
def fee_configuration():
    return FeeConfiguration(
        credit_visa=Decimal("3"),
        credit_mastercard=Decimal("3"),
        credit_elo=Decimal("4"),
        debit_visa=Decimal("1.5"),
        debit_mastercard=Decimal("1.5"),
        debit_elo=Decimal("2"),
        pix_qr_code=Decimal("1"),
        investment_percentage=Decimal("10"),
    )


@pytest.fixture
def sample_sale():
    """A Monday of sales across cash, pix and cards."""
    return SalesRecord(
        id="sale-1",
        date=date(2024, 1, 15),
        day_of_week="segunda-feira",
        cash=Decimal("200"),
        pix_manual=Decimal("50"),
        pix_qr_code=Decimal("100"),
        credit_visa=Decimal("300"),
        debit_mastercard=Decimal("150"),
    )


@pytest.fixture
def seeded_db(temp_db, empty_snapshot):
    """Temporary database holding the two-account snapshot."""
    temp_db.save_snapshot(empty_snapshot)
    return temp_db


@pytest.fixture
def stored_snapshot(temp_db):
    """Return a function reading what the CLI last saved.

    A fresh connection is used so no cached row from the fixture session
    is returned.
    """

    def load():
        db = create_sqlite_database(database_path=temp_db.database_path)
        try:
            return db.load_snapshot()
        finally:
            db.disconnect()

    return load
