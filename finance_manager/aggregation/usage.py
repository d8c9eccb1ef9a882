"""
Budget Usage Metrics

Percentage-of-budget computation and the classification bands views
colour budgets by.

The cut points are exact: 85.0 is still NORMAL, 100.0 is still WARNING.
"""

from decimal import Decimal

from finance_manager.models.budget import BudgetStatus


WARNING_THRESHOLD = 85.0
OVER_BUDGET_THRESHOLD = 100.0


def usage_percentage(spent: Decimal, allocated: Decimal) -> float:
    """
    Spent as a percentage of allocated.

    Returns 0.0 when nothing is allocated. Not clamped, so overspending
    shows as a value above 100.
    """
    if allocated <= 0:
        return 0.0
    return float(spent / allocated * 100)


def classify_usage(percentage: float) -> BudgetStatus:
    if percentage > OVER_BUDGET_THRESHOLD:
        return BudgetStatus.OVER_BUDGET
    if percentage > WARNING_THRESHOLD:
        return BudgetStatus.WARNING
    return BudgetStatus.NORMAL
