"""Tests for manual transactions and the add/transaction commands."""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from ledgerbook.cli.main import cli
from ledgerbook.domain.entities import PostingSource, SourceKind, TransactionKind
from ledgerbook.domain.errors import NotFoundError, ValidationError
from ledgerbook.domain.transaction import TransactionService


def _add(snapshot, day=date(2024, 1, 15), amount="50", kind=TransactionKind.EXPENSE, **kwargs):
    fields = dict(
        kind=kind,
        date=day,
        description="Energia",
        category="Despesas Fixas",
        account="Caixa Físico",
        amount=Decimal(amount),
    )
    fields.update(kwargs)
    return TransactionService(snapshot).create_transaction(**fields)


class TestTransactionService:
    def test_create(self, empty_snapshot):
        change = _add(empty_snapshot, supplier="Enel", doc_number="12")

        (txn,) = change.added
        assert txn.id.startswith("trans-")
        assert txn.supplier == "Enel"
        assert txn.doc_number == "12"
        assert txn.source.kind is SourceKind.MANUAL
        assert change.snapshot.transactions == (txn,)

    @pytest.mark.parametrize("amount", ["0", "-10"])
    def test_create_rejects_non_positive(self, empty_snapshot, amount):
        with pytest.raises(ValidationError):
            _add(empty_snapshot, amount=amount)

    def test_get_missing(self, empty_snapshot):
        assert TransactionService(empty_snapshot).get_transaction("trans-x") is None

    def test_update_replaces_and_resorts(self, empty_snapshot):
        snapshot = _add(empty_snapshot, day=date(2024, 1, 10)).snapshot
        snapshot = _add(snapshot, day=date(2024, 1, 12), description="Água").snapshot
        energia = next(t for t in snapshot.transactions if t.description == "Energia")

        change = TransactionService(snapshot).update_transaction(
            replace(energia, date=date(2024, 1, 20), amount=Decimal("65"))
        )

        first = change.snapshot.transactions[0]
        assert first.id == energia.id
        assert first.amount == Decimal("65")
        assert change.removed == (energia,)

    def test_update_keeps_provenance(self, empty_snapshot):
        snapshot = _add(empty_snapshot).snapshot
        txn = snapshot.transactions[0]

        forged = replace(txn, source=PostingSource(kind=SourceKind.TRANSFER, ref="x"))
        change = TransactionService(snapshot).update_transaction(forged)

        assert change.added[0].source.kind is SourceKind.MANUAL

    def test_update_missing(self, empty_snapshot):
        txn = _add(empty_snapshot).added[0]
        with pytest.raises(NotFoundError):
            TransactionService(empty_snapshot).update_transaction(txn)

    def test_update_rejects_non_positive(self, empty_snapshot):
        snapshot = _add(empty_snapshot).snapshot
        with pytest.raises(ValidationError):
            TransactionService(snapshot).update_transaction(
                replace(snapshot.transactions[0], amount=Decimal("0"))
            )

    def test_delete(self, empty_snapshot):
        snapshot = _add(empty_snapshot).snapshot
        txn_id = snapshot.transactions[0].id

        change = TransactionService(snapshot).delete_transaction(txn_id)

        assert change.snapshot.transactions == ()
        with pytest.raises(NotFoundError):
            TransactionService(change.snapshot).delete_transaction(txn_id)

    def test_list_filters(self, empty_snapshot):
        snapshot = _add(empty_snapshot, day=date(2024, 1, 5)).snapshot
        snapshot = _add(snapshot, day=date(2024, 2, 5), account="Cofre").snapshot
        snapshot = _add(
            snapshot, day=date(2024, 2, 6), kind=TransactionKind.REVENUE, category="Outras Receitas"
        ).snapshot
        service = TransactionService(snapshot)

        assert len(service.list_transactions()) == 3
        assert len(service.list_transactions(start_date=date(2024, 2, 1))) == 2
        assert len(service.list_transactions(end_date=date(2024, 1, 31))) == 1
        assert len(service.list_transactions(account="Cofre")) == 1
        assert len(service.list_transactions(kind=TransactionKind.REVENUE)) == 1
        assert len(service.list_transactions(category="Despesas Fixas")) == 2


class TestAddCommand:
    def test_add_minimal(self, cli_runner, seeded_db, stored_snapshot):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                seeded_db.database_path,
                "add",
                "--type",
                "expense",
                "--account",
                "Cofre",
                "--date",
                "15/01/2024",
                "--amount",
                "1.234,56",
                "--description",
                "Fornecedor",
                "--category",
                "Fornecedores",
            ],
        )

        assert result.exit_code == 0
        assert "Created transaction" in result.output
        assert "R$ 1,234.56" in result.output
        (txn,) = stored_snapshot().transactions
        assert txn.amount == Decimal("1234.56")
        assert txn.date == date(2024, 1, 15)
        assert txn.account == "Cofre"

    def test_add_with_account_id(self, cli_runner, seeded_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", seeded_db.database_path,
                "add", "--type", "revenue", "--account", "acc-1",
                "--amount", "10", "--description", "Venda", "--category", "Outras Receitas",
            ],
        )

        assert result.exit_code == 0
        assert "Caixa Físico" in result.output

    def test_add_unknown_category_warns(self, cli_runner, seeded_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", seeded_db.database_path,
                "add", "--type", "expense", "--account", "Cofre",
                "--amount", "10", "--description", "x", "--category", "Inexistente",
            ],
        )

        assert result.exit_code == 0
        assert "not a known expense category" in result.output

    def test_add_unknown_account(self, cli_runner, seeded_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", seeded_db.database_path,
                "add", "--type", "expense", "--account", "Banco",
                "--amount", "10", "--description", "x", "--category", "Fornecedores",
            ],
        )

        assert result.exit_code == 1
        assert "Account 'Banco' not found" in result.output

    def test_add_invalid_amount(self, cli_runner, seeded_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", seeded_db.database_path,
                "add", "--type", "expense", "--account", "Cofre",
                "--amount", "abc", "--description", "x", "--category", "Fornecedores",
            ],
        )

        assert result.exit_code == 1
        assert "Invalid amount format" in result.output

    def test_add_negative_amount(self, cli_runner, seeded_db, stored_snapshot):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", seeded_db.database_path,
                "add", "--type", "expense", "--account", "Cofre",
                "--amount", "(5,00)", "--description", "x", "--category", "Fornecedores",
            ],
        )

        assert result.exit_code == 1
        assert "greater than zero" in result.output
        assert stored_snapshot().transactions == ()

    def test_add_invalid_date(self, cli_runner, seeded_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", seeded_db.database_path,
                "add", "--type", "expense", "--account", "Cofre", "--date", "31/02/2024",
                "--amount", "5", "--description", "x", "--category", "Fornecedores",
            ],
        )

        assert result.exit_code == 1
        assert "Error" in result.output


class TestTransactionCommands:
    @pytest.fixture
    def posted_db(self, temp_db, empty_snapshot):
        snapshot = _add(empty_snapshot, day=date(2024, 1, 10), description="Energia").snapshot
        snapshot = _add(
            snapshot,
            day=date(2024, 1, 12),
            description="Serviço",
            kind=TransactionKind.REVENUE,
            category="Outras Receitas",
            account="Cofre",
            observation="Pago em dinheiro",
        ).snapshot
        temp_db.save_snapshot(snapshot)
        return temp_db

    def _txn_id(self, db, description):
        return next(t.id for t in db.load_snapshot().transactions if t.description == description)

    def test_list(self, cli_runner, posted_db):
        result = cli_runner.invoke(cli, ["--db-path", posted_db.database_path, "transaction", "list"])

        assert result.exit_code == 0
        assert "Found 2 transaction(s)" in result.output
        assert "Energia" in result.output
        assert "Revenue: R$ 50.00 | Expenses: R$ 50.00" in result.output

    def test_list_filtered_by_account(self, cli_runner, posted_db):
        result = cli_runner.invoke(
            cli, ["--db-path", posted_db.database_path, "transaction", "list", "--account", "Cofre"]
        )

        assert result.exit_code == 0
        assert "Found 1 transaction(s)" in result.output
        assert "Serviço" in result.output

    def test_list_date_range(self, cli_runner, posted_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", posted_db.database_path,
                "transaction", "list", "--start-date", "11/01/2024", "--end-date", "2024-01-31",
            ],
        )

        assert result.exit_code == 0
        assert "Found 1 transaction(s)" in result.output

    def test_list_verbose(self, cli_runner, posted_db):
        result = cli_runner.invoke(
            cli, ["--db-path", posted_db.database_path, "transaction", "list", "--verbose"]
        )

        assert result.exit_code == 0
        assert "Observation: Pago em dinheiro" in result.output

    def test_list_empty(self, cli_runner, seeded_db):
        result = cli_runner.invoke(cli, ["--db-path", seeded_db.database_path, "transaction", "list"])

        assert result.exit_code == 0
        assert "No transactions found." in result.output

    def test_update(self, cli_runner, posted_db, stored_snapshot):
        txn_id = self._txn_id(posted_db, "Energia")

        result = cli_runner.invoke(
            cli,
            [
                "--db-path", posted_db.database_path,
                "transaction", "update", txn_id, "--amount", "75,50", "--account", "Cofre",
            ],
        )

        assert result.exit_code == 0
        assert f"Updated transaction {txn_id}" in result.output
        txn = next(t for t in stored_snapshot().transactions if t.id == txn_id)
        assert txn.amount == Decimal("75.50")
        assert txn.account == "Cofre"
        assert txn.description == "Energia"

    def test_update_missing(self, cli_runner, posted_db):
        result = cli_runner.invoke(
            cli, ["--db-path", posted_db.database_path, "transaction", "update", "trans-x", "--amount", "1"]
        )

        assert result.exit_code == 1
        assert "Transaction trans-x not found" in result.output

    def test_delete_confirmed(self, cli_runner, posted_db, stored_snapshot):
        txn_id = self._txn_id(posted_db, "Energia")

        result = cli_runner.invoke(
            cli, ["--db-path", posted_db.database_path, "transaction", "delete", txn_id], input="y\n"
        )

        assert result.exit_code == 0
        assert f"Deleted transaction {txn_id}" in result.output
        assert [t.description for t in stored_snapshot().transactions] == ["Serviço"]

    def test_delete_cancelled(self, cli_runner, posted_db, stored_snapshot):
        txn_id = self._txn_id(posted_db, "Energia")

        result = cli_runner.invoke(
            cli, ["--db-path", posted_db.database_path, "transaction", "delete", txn_id], input="n\n"
        )

        assert result.exit_code == 0
        assert "Deletion cancelled." in result.output
        assert len(stored_snapshot().transactions) == 2
