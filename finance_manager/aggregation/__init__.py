"""Aggregation algorithms shared by the stores."""

from finance_manager.aggregation.categories import sum_amounts, totals_by_category
from finance_manager.aggregation.monthly import (
    date_span,
    in_month,
    month_floor,
    month_keys_between,
    monthly_totals,
    next_month,
)
from finance_manager.aggregation.usage import (
    OVER_BUDGET_THRESHOLD,
    WARNING_THRESHOLD,
    classify_usage,
    usage_percentage,
)

__all__ = [
    "OVER_BUDGET_THRESHOLD",
    "WARNING_THRESHOLD",
    "classify_usage",
    "date_span",
    "in_month",
    "month_floor",
    "month_keys_between",
    "monthly_totals",
    "next_month",
    "sum_amounts",
    "totals_by_category",
    "usage_percentage",
]
