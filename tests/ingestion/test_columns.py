import pytest

from errors import FormatError
from ingestion.columns import ColumnMap, find_column, infer_columns


class TestInferColumns:
    """Tests for infer_columns function."""

    def test_amount_layout(self):
        """Test a single signed amount column."""
        columns = infer_columns(["Date", "Description", "Amount", "Balance"])

        assert columns == ColumnMap(date=0, description=1, amount=2, balance=3)
        assert not columns.has_debit_credit

    def test_debit_credit_layout(self):
        """Test a debit/credit pair without an amount column."""
        columns = infer_columns(["Date", "Description", "Debit", "Credit", "Balance"])

        assert columns.amount is None
        assert columns.debit == 2
        assert columns.credit == 3
        assert columns.balance == 4
        assert columns.has_debit_credit

    def test_headers_are_case_insensitive(self):
        """Test that header matching ignores case and whitespace."""
        columns = infer_columns(["  TRANSACTION DATE ", "NARRATION", "AMOUNT"])

        assert columns.date == 0
        assert columns.description == 1
        assert columns.amount == 2

    def test_description_synonyms(self):
        """Test that details and reference headers count as description."""
        assert infer_columns(["Date", "Details", "Amount"]).description == 1
        assert infer_columns(["Date", "Reference", "Amount"]).description == 1

    def test_balance_amount_is_not_amount(self):
        """Test that an 'Amount Balance' header is not taken as the amount."""
        columns = infer_columns(["Date", "Description", "Balance Amount", "Amount"])

        assert columns.amount == 3
        assert columns.balance == 2

    def test_withdrawal_deposit_synonyms(self):
        """Test that withdrawal/deposit headers count as debit/credit."""
        columns = infer_columns(["Date", "Description", "Withdrawals", "Deposits"])

        assert columns.debit == 2
        assert columns.credit == 3

    def test_first_matching_header_wins(self):
        """Test that the leftmost match is used for a role."""
        columns = infer_columns(["Post Date", "Value Date", "Description", "Amount"])

        assert columns.date == 0

    def test_one_header_can_fill_two_roles(self):
        """Test that 'Debit Amount' matches both amount and debit."""
        columns = infer_columns(["Date", "Description", "Debit Amount", "Credit"])

        assert columns.amount == 2
        assert columns.debit == 2
        assert columns.credit == 3

    def test_missing_date_raises(self):
        """Test that a header without a date column is rejected."""
        with pytest.raises(FormatError, match="date or description"):
            infer_columns(["Description", "Amount"])

    def test_missing_description_raises(self):
        """Test that a header without a description column is rejected."""
        with pytest.raises(FormatError, match="date or description"):
            infer_columns(["Date", "Amount"])

    def test_missing_amount_raises(self):
        """Test that a header without any amount column is rejected."""
        with pytest.raises(FormatError, match="amount, debit, or credit"):
            infer_columns(["Date", "Description", "Balance"])

    def test_debit_without_credit_raises(self):
        """Test that an incomplete debit/credit pair is rejected."""
        with pytest.raises(FormatError):
            infer_columns(["Date", "Description", "Debit"])

    def test_format_error_is_value_error(self):
        """Test that FormatError can be caught as ValueError."""
        with pytest.raises(ValueError):
            infer_columns([])


class TestColumnMap:
    """Tests for ColumnMap helpers."""

    def test_required_width(self):
        """Test that rows must reach the date and description columns."""
        assert ColumnMap(date=3, description=1, amount=0).required_width == 4

    def test_find_column_none(self):
        """Test that find_column returns None without a match."""
        assert find_column(["a", "b"], lambda header: header == "c") is None
