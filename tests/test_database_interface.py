"""Tests for the snapshot store and the CLI loading around it."""

import json
import pytest
from datetime import date
from decimal import Decimal

from sqlalchemy.exc import OperationalError

from ledgerbook.cli.main import cli
from ledgerbook.cli.state import open_snapshot
from ledgerbook.config import SNAPSHOT_KEY
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.database.models import SnapshotRecord
from ledgerbook.database.sqlalchemy_db import SQLAlchemyDatabase
from ledgerbook.domain import entities
from ledgerbook.domain.entities import Frequency, TransactionKind
from ledgerbook.domain.recurrence import RecurringService
from ledgerbook.domain.snapshot import replace_collection, replace_fee_configuration
from ledgerbook.domain.transaction import TransactionService


def _with_posting(snapshot):
    return TransactionService(snapshot).create_transaction(
        kind=TransactionKind.EXPENSE,
        date=date(2024, 1, 15),
        description="Energia",
        category="Despesas Fixas",
        account="Cofre",
        amount=Decimal("150"),
    ).snapshot


class TestSnapshotStore:
    def test_load_empty_returns_none(self, temp_db):
        assert temp_db.load_snapshot() is None

    def test_save_and_load(self, temp_db, empty_snapshot):
        snapshot = _with_posting(empty_snapshot)

        temp_db.save_snapshot(snapshot)
        loaded = temp_db.load_snapshot()

        assert isinstance(loaded, entities.Snapshot)
        assert loaded == snapshot

    def test_save_replaces_whole_snapshot(self, temp_db, empty_snapshot, stored_snapshot):
        temp_db.save_snapshot(_with_posting(empty_snapshot))
        temp_db.save_snapshot(empty_snapshot)

        assert stored_snapshot() == empty_snapshot

    def test_snapshot_visible_to_new_connection(self, temp_db, empty_snapshot):
        temp_db.save_snapshot(empty_snapshot)

        other = create_sqlite_database(database_path=temp_db.database_path)
        try:
            assert other.load_snapshot() == empty_snapshot
        finally:
            other.disconnect()

    def test_keys_are_independent(self, temp_db, empty_snapshot):
        other = SQLAlchemyDatabase(f"sqlite:///{temp_db.database_path}", key="backup")
        try:
            other.save_snapshot(_with_posting(empty_snapshot))
            temp_db.save_snapshot(empty_snapshot)

            assert len(other.load_snapshot().transactions) == 1
            assert temp_db.load_snapshot().transactions == ()
        finally:
            other.disconnect()

    def test_failed_commit_keeps_stored_snapshot(
        self, temp_db, empty_snapshot, stored_snapshot, monkeypatch
    ):
        temp_db.save_snapshot(empty_snapshot)
        session = temp_db._get_session()

        def fail():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(session, "commit", fail)

        with pytest.raises(OperationalError):
            temp_db.save_snapshot(_with_posting(empty_snapshot))
        assert stored_snapshot() == empty_snapshot

    def test_env_var_database_path(self, temp_db, empty_snapshot, monkeypatch):
        monkeypatch.setenv("LEDGERBOOK_DB_PATH", temp_db.database_path)
        temp_db.save_snapshot(empty_snapshot)

        db = create_sqlite_database()
        try:
            assert db.load_snapshot() == empty_snapshot
        finally:
            db.disconnect()


class TestOpenSnapshot:
    def test_first_run_creates_defaults(self, temp_db):
        snapshot, dirty = open_snapshot(temp_db, date(2024, 1, 17))

        assert dirty
        assert [a.name for a in snapshot.accounts][0] == "Caixa Físico"
        assert snapshot.sales[0].date == date(2024, 1, 15)

    def test_stored_snapshot_is_clean(self, temp_db, empty_snapshot):
        temp_db.save_snapshot(empty_snapshot)

        snapshot, dirty = open_snapshot(temp_db, date(2024, 1, 17))

        assert not dirty
        assert snapshot == empty_snapshot

    def test_due_recurrences_are_posted(self, temp_db, empty_snapshot):
        snapshot, _ = RecurringService(empty_snapshot).create(
            kind=TransactionKind.EXPENSE,
            description="Aluguel",
            category="Despesas Fixas",
            account="Cofre",
            amount=Decimal("1500"),
            frequency=Frequency.MONTHLY,
            start_date=date(2024, 1, 1),
        )
        temp_db.save_snapshot(snapshot)

        opened, dirty = open_snapshot(temp_db, date(2024, 2, 10))

        assert dirty
        assert [t.date for t in opened.transactions] == [date(2024, 2, 1), date(2024, 1, 1)]


class TestWholesaleReplacement:
    def test_replace_transactions_resorts(self, empty_snapshot):
        older = _with_posting(empty_snapshot).transactions[0]
        newer = TransactionService(empty_snapshot).create_transaction(
            kind=TransactionKind.REVENUE,
            date=date(2024, 3, 1),
            description="Serviço",
            category="Outras Receitas",
            account="Cofre",
            amount=Decimal("10"),
        ).added[0]

        snapshot = replace_collection(empty_snapshot, "transactions", [older, newer])

        assert snapshot.transactions == (newer, older)

    def test_replace_accounts_discards_old(self, empty_snapshot):
        snapshot = replace_collection(empty_snapshot, "accounts", [])
        assert snapshot.accounts == ()

    def test_unknown_collection(self, empty_snapshot):
        with pytest.raises(KeyError):
            replace_collection(empty_snapshot, "fee_configuration", [])

    def test_replace_fee_configuration(self, empty_snapshot, fee_configuration):
        snapshot = replace_fee_configuration(empty_snapshot, fee_configuration)
        assert snapshot.fee_configuration == fee_configuration
        assert empty_snapshot.fee_configuration.credit_visa == 0


def test_unreadable_stored_value_is_reported(cli_runner, temp_db):
    session = temp_db.session_factory()
    session.add(
        SnapshotRecord(
            key=SNAPSHOT_KEY,
            payload=json.dumps({"accounts": [{"id": "acc-1", "name": "Cofre", "initialBalance": "abc"}]}),
        )
    )
    session.commit()
    session.close()

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 1
    assert "Stored data could not be read" in result.output
