"""Tests for CSV transaction import."""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

from finance_manager.importers import (
    CsvTransactionImporter,
    MalformedRowError,
    TransactionImportError,
)
from finance_manager.orchestrator import ImportFlow
from finance_manager.stores import TransactionStore


HEADER = "Date,Amount,Type,Category,Description\n"
FALLBACK = datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def importer():
    return CsvTransactionImporter(date_format="%Y-%m-%d %H:%M:%S", clock=lambda: FALLBACK)


def write_csv(tmp_path, body, header=HEADER):
    path = tmp_path / "transactions.csv"
    path.write_text(header + body, encoding="utf-8")
    return path


class TestCsvImporter:
    """Tests for CsvTransactionImporter."""

    def test_imports_valid_rows(self, importer, tmp_path):
        """Test a well-formed file, including a quoted comma."""
        path = write_csv(
            tmp_path,
            "2024-06-01 10:00:00,12.50,Expense,Food,\"Lunch, with team\"\n"
            "2024-06-02 09:00:00,3000,Income,Salary,June pay\n",
        )

        transactions = importer.import_transactions(path)

        assert len(transactions) == 2
        lunch, salary = transactions
        assert lunch.date == datetime(2024, 6, 1, 10, 0)
        assert lunch.amount == Decimal("12.50")
        assert lunch.is_income is False
        assert lunch.description == "Lunch, with team"
        assert salary.is_income is True
        assert salary.category == "Salary"
        assert all(t.id == 0 for t in transactions)

    def test_type_is_case_insensitive(self, importer, tmp_path):
        """Test only 'income' in any casing marks income."""
        path = write_csv(
            tmp_path,
            "2024-06-01 10:00:00,1,INCOME,Gift,\n"
            "2024-06-01 10:00:00,1,refund,Shop,\n",
        )
        first, second = importer.import_transactions(path)
        assert first.is_income is True
        assert second.is_income is False

    def test_header_names_are_not_checked(self, importer, tmp_path):
        """Test columns are read by position."""
        path = write_csv(
            tmp_path,
            "2024-06-01 10:00:00,5,Expense,Gas,Fuel\n",
            header="when,how much,kind,group,note\n",
        )
        assert importer.import_transactions(path)[0].category == "Gas"

    def test_header_only_file(self, importer, tmp_path):
        """Test a header with no rows imports nothing."""
        assert importer.import_transactions(write_csv(tmp_path, "")) == []

    def test_unparseable_date_falls_back_to_clock(self, importer, tmp_path):
        """Test a bad date uses the injected clock instead of failing."""
        path = write_csv(tmp_path, "yesterday,9.99,Expense,Food,Snack\n")
        transaction = importer.import_transactions(path)[0]
        assert transaction.date == FALLBACK
        assert transaction.amount == Decimal("9.99")

    def test_bad_amount_aborts(self, importer, tmp_path):
        """Test a non-numeric amount raises with the row number."""
        path = write_csv(
            tmp_path,
            "2024-06-01 10:00:00,5,Expense,Food,ok\n"
            "2024-06-01 10:00:00,abc,Expense,Food,bad\n",
        )
        with pytest.raises(MalformedRowError) as exc_info:
            importer.import_transactions(path)
        assert exc_info.value.row_number == 2
        assert exc_info.value.column == "Amount"

    def test_negative_amount_aborts(self, importer, tmp_path):
        """Test negative amounts are rejected."""
        path = write_csv(tmp_path, "2024-06-01 10:00:00,-5,Expense,Food,\n")
        with pytest.raises(MalformedRowError, match="negative"):
            importer.import_transactions(path)

    def test_missing_field_aborts(self, importer, tmp_path):
        """Test a short row raises."""
        path = write_csv(tmp_path, "2024-06-01 10:00:00,5,Expense\n")
        with pytest.raises(MalformedRowError, match="missing value"):
            importer.import_transactions(path)

    def test_missing_file(self, importer, tmp_path):
        """Test a path that does not exist."""
        with pytest.raises(TransactionImportError, match="not found"):
            importer.import_transactions(tmp_path / "nope.csv")

    def test_empty_file(self, importer, tmp_path):
        """Test a zero-byte file."""
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(TransactionImportError):
            importer.import_transactions(path)

    def test_too_few_columns(self, importer, tmp_path):
        """Test a file without the five columns."""
        path = write_csv(tmp_path, "2024-06-01,5\n", header="Date,Amount\n")
        with pytest.raises(TransactionImportError, match="Expected 5 columns"):
            importer.import_transactions(path)


class TestImportFlow:
    """Tests for committing an import to the store."""

    def test_import_adds_each_record(self, importer, tmp_path):
        """Test every row is added and observers fire once per row."""
        store = TransactionStore()
        observer = Mock()
        store.add_observer(observer)
        path = write_csv(
            tmp_path,
            "2024-06-01 10:00:00,10,Expense,Food,\n"
            "2024-06-02 10:00:00,20,Expense,Gas,\n"
            "2024-06-03 10:00:00,30,Income,Salary,\n",
        )

        result = ImportFlow(store, importer=importer).import_csv(path)

        assert result.imported_count == 3
        assert [t.id for t in result.transactions] == [1, 2, 3]
        assert len(store) == 3
        assert observer.call_count == 3

    def test_failed_import_leaves_store_unchanged(self, importer, tmp_path):
        """Test a bad last row commits nothing."""
        store = TransactionStore()
        store.add(importer.import_transactions(
            write_csv(tmp_path, "2024-05-01 10:00:00,1,Expense,Food,\n")
        )[0])
        observer = Mock()
        store.add_observer(observer)
        path = write_csv(
            tmp_path,
            "2024-06-01 10:00:00,10,Expense,Food,\n"
            "2024-06-02 10:00:00,ten,Expense,Gas,\n",
        )

        with pytest.raises(MalformedRowError):
            ImportFlow(store, importer=importer).import_csv(path)

        assert len(store) == 1
        observer.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
