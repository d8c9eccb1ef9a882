"""Tests for the aggregation algorithms."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from finance_manager.aggregation import (
    classify_usage,
    date_span,
    in_month,
    month_keys_between,
    monthly_totals,
    next_month,
    sum_amounts,
    totals_by_category,
    usage_percentage,
)
from finance_manager.models import BudgetStatus, Transaction


def tx(when, amount, income=False, category="Food"):
    return Transaction(
        date=when,
        amount=Decimal(amount),
        is_income=income,
        category=category,
    )


class TestMonthSequence:
    """Tests for month key generation."""

    def test_next_month_rolls_over_year(self):
        """Test December rolls into January of the next year."""
        assert next_month(date(2023, 12, 1)) == date(2024, 1, 1)
        assert next_month(date(2024, 1, 1)) == date(2024, 2, 1)

    def test_keys_inclusive_of_both_ends(self):
        """Test that both boundary months are included."""
        keys = month_keys_between(datetime(2023, 11, 30), datetime(2024, 2, 1))
        assert keys == ["2023-11", "2023-12", "2024-01", "2024-02"]

    def test_single_month(self):
        """Test start and end in the same month."""
        assert month_keys_between(datetime(2024, 5, 1), datetime(2024, 5, 31)) == ["2024-05"]

    def test_date_span_empty(self):
        """Test that no transactions gives no span."""
        assert date_span([]) is None


class TestMonthlyTotals:
    """Tests for gap-filled monthly aggregation."""

    def test_gap_month_is_zero(self):
        """Test transactions in January and March produce February = 0."""
        transactions = [
            tx(datetime(2024, 1, 10), "100"),
            tx(datetime(2024, 3, 5), "40"),
        ]
        result = monthly_totals(transactions, income=False)
        assert list(result) == ["2024-01", "2024-02", "2024-03"]
        assert result["2024-02"] == 0
        assert result["2024-01"] == Decimal("100")

    def test_range_spans_both_kinds(self):
        """Test months with only income still appear in the expense series."""
        transactions = [
            tx(datetime(2024, 1, 10), "100"),
            tx(datetime(2024, 4, 1), "900", income=True),
        ]
        expenses = monthly_totals(transactions, income=False)
        assert list(expenses) == ["2024-01", "2024-02", "2024-03", "2024-04"]
        assert expenses["2024-04"] == 0

    def test_keys_are_chronological_regardless_of_input_order(self):
        """Test key order does not depend on insertion order."""
        transactions = [
            tx(datetime(2024, 3, 1), "1"),
            tx(datetime(2023, 12, 1), "1"),
        ]
        keys = list(monthly_totals(transactions, income=False))
        assert keys == sorted(keys)
        assert keys[0] == "2023-12"

    def test_empty_input(self):
        """Test aggregation over nothing is empty, not an error."""
        assert monthly_totals([], income=True) == {}

    def test_in_month(self):
        """Test calendar month membership."""
        transaction = tx(datetime(2024, 6, 30, 23, 59), "1")
        assert in_month(transaction, 2024, 6)
        assert not in_month(transaction, 2024, 7)
        assert not in_month(transaction, 2023, 6)


class TestCategoryTotals:
    """Tests for category rollups."""

    def test_totals_by_category_filters_kind(self):
        """Test that only the requested kind is summed."""
        transactions = [
            tx(datetime(2024, 1, 1), "10", category="Food"),
            tx(datetime(2024, 1, 2), "5", category="Food"),
            tx(datetime(2024, 1, 3), "1000", income=True, category="Salary"),
            tx(datetime(2024, 1, 4), "30", category="Gas"),
        ]
        assert totals_by_category(transactions, income=False) == {
            "Food": Decimal("15"),
            "Gas": Decimal("30"),
        }
        assert totals_by_category(transactions, income=True) == {"Salary": Decimal("1000")}
        assert len(totals_by_category(transactions)) == 3

    def test_sum_amounts_empty(self):
        """Test the empty sum is zero."""
        assert sum_amounts([]) == Decimal("0")


class TestUsage:
    """Tests for percentage and classification."""

    def test_percentage(self):
        """Test basic percentage."""
        assert usage_percentage(Decimal("200"), Decimal("300")) == pytest.approx(66.7, abs=0.05)

    def test_percentage_not_clamped(self):
        """Test overspending exceeds 100."""
        assert usage_percentage(Decimal("150"), Decimal("100")) == 150.0

    def test_zero_allocation(self):
        """Test zero allocation yields exactly 0."""
        assert usage_percentage(Decimal("500"), Decimal("0")) == 0.0

    @pytest.mark.parametrize(
        "percentage,expected",
        [
            (0.0, BudgetStatus.NORMAL),
            (85.0, BudgetStatus.NORMAL),
            (85.01, BudgetStatus.WARNING),
            (100.0, BudgetStatus.WARNING),
            (100.01, BudgetStatus.OVER_BUDGET),
            (250.0, BudgetStatus.OVER_BUDGET),
        ],
    )
    def test_classification_cut_points(self, percentage, expected):
        """Test the exact 85 and 100 cut points."""
        assert classify_usage(percentage) == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
