from types import SimpleNamespace

import pytest

from cli import categories as categories_cli
from cli import transactions as transactions_cli
from ingestion import parse_csv

STATEMENT = """Date,Description,Amount
2025-11-01,Fuel stop,-600.00
2025-11-02,Parking,-20.00
"""


@pytest.fixture
def statement(tmp_path):
    path = tmp_path / "statement.csv"
    path.write_text(STATEMENT)
    return path


class TestTransactionCommands:
    """Tests for the transactions subcommands."""

    def test_ingest_uses_system_label_and_account(self, services, statement):
        """Test that ingest stores rows under the system label."""
        account = services.accounts.create("cheque", "Bank")

        transactions_cli.cmd_ingest(
            SimpleNamespace(csv_file=str(statement), account_name="cheque"), services
        )

        stored = services.transactions.find_all()
        assert len(stored) == 2
        assert {t.category for t in stored} == {"Uncategorized"}
        assert {t.account_id for t in stored} == {account.id}
        assert services.categories.system_category().name == "Uncategorized"

    def test_ingest_twice_skips_duplicates(self, services, statement):
        """Test that a second ingest of the same file adds nothing."""
        args = SimpleNamespace(csv_file=str(statement), account_name=None)

        transactions_cli.cmd_ingest(args, services)
        transactions_cli.cmd_ingest(args, services)

        assert len(services.transactions.find_all()) == 2

    def test_ingest_bad_header_exits(self, services, tmp_path):
        """Test that an unreadable file exits with status 1."""
        path = tmp_path / "bad.csv"
        path.write_text("Foo,Bar\n1,2\n")

        with pytest.raises(SystemExit) as exc_info:
            transactions_cli.cmd_ingest(
                SimpleNamespace(csv_file=str(path), account_name=None), services
            )

        assert exc_info.value.code == 1

    def test_ingest_unknown_account_exits(self, services, statement):
        """Test that an unknown account name exits with status 1."""
        with pytest.raises(SystemExit):
            transactions_cli.cmd_ingest(
                SimpleNamespace(csv_file=str(statement), account_name="nope"), services
            )

    def test_set_category_by_path(self, services, statement, transport_tree):
        """Test categorizing a transaction by full path."""
        transactions_cli.cmd_ingest(
            SimpleNamespace(csv_file=str(statement), account_name=None), services
        )
        transaction = services.transactions.find_all()[0]

        transactions_cli.cmd_set_category(
            SimpleNamespace(
                transaction_id=transaction.id, category="Transport → Fuel", legacy=False
            ),
            services,
        )

        updated = services.transactions.find(transaction.id)
        assert updated.category == "Transport → Fuel"
        assert updated.category_id == transport_tree["Fuel"].id

    def test_set_category_by_name(self, services, statement, transport_tree):
        """Test categorizing a transaction by bare category name."""
        transactions_cli.cmd_ingest(
            SimpleNamespace(csv_file=str(statement), account_name=None), services
        )
        transaction = services.transactions.find_all()[0]

        transactions_cli.cmd_set_category(
            SimpleNamespace(transaction_id=transaction.id, category="Parking", legacy=False),
            services,
        )

        updated = services.transactions.find(transaction.id)
        assert updated.category == "Transport → Parking"
        assert updated.category_id == transport_tree["Parking"].id

    def test_set_category_unknown_name_exits(self, services, statement):
        """Test that a category that matches nothing exits with status 1."""
        transactions_cli.cmd_ingest(
            SimpleNamespace(csv_file=str(statement), account_name=None), services
        )
        transaction = services.transactions.find_all()[0]

        with pytest.raises(SystemExit) as exc_info:
            transactions_cli.cmd_set_category(
                SimpleNamespace(transaction_id=transaction.id, category="Nope", legacy=False),
                services,
            )

        assert exc_info.value.code == 1

    def test_set_category_legacy(self, services, statement):
        """Test storing a plain label with --legacy."""
        transactions_cli.cmd_ingest(
            SimpleNamespace(csv_file=str(statement), account_name=None), services
        )
        transaction = services.transactions.find_all()[0]

        transactions_cli.cmd_set_category(
            SimpleNamespace(transaction_id=transaction.id, category="Petrol", legacy=True),
            services,
        )

        assert services.transactions.find(transaction.id).category == "Petrol"

    def test_clear_with_yes(self, services, statement):
        """Test clearing without a confirmation prompt."""
        transactions_cli.cmd_ingest(
            SimpleNamespace(csv_file=str(statement), account_name=None), services
        )

        transactions_cli.cmd_clear(SimpleNamespace(yes=True), services)

        assert services.transactions.find_all() == []


class TestCategoryCommands:
    """Tests for the categories subcommands."""

    def test_rename_relabels(self, services, transport_tree):
        """Test that the rename command cascades to transactions."""
        transaction = services.transactions.import_batch(
            parse_csv(STATEMENT, default_category="Transport → Fuel")
        )[0]

        categories_cli.cmd_rename(
            SimpleNamespace(category_id=transport_tree["Transport"].id, name="Travel"),
            services,
        )

        assert services.transactions.find(transaction.id).category == "Travel → Fuel"

    def test_move_under_descendant_exits(self, services, transport_tree):
        """Test that an illegal move exits with status 1."""
        with pytest.raises(SystemExit):
            categories_cli.cmd_move(
                SimpleNamespace(
                    category_id=transport_tree["Transport"].id,
                    parent=transport_tree["Fuel"].id,
                ),
                services,
            )

    def test_delete_with_yes(self, services, transport_tree):
        """Test deleting a category subtree without prompting."""
        categories_cli.cmd_delete(
            SimpleNamespace(category_id=transport_tree["Transport"].id, yes=True), services
        )

        assert [c.name for c in services.categories.find_all()] == ["Food", "Uncategorized"]

    def test_seed(self, services):
        """Test seeding through the command."""
        categories_cli.cmd_seed(SimpleNamespace(), services)

        assert services.categories.system_category() is not None
