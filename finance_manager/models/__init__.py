"""
Data Models Package

This package contains all Pydantic models used in the Finance Manager core.
Every record held by a store conforms to one of these schemas.
"""

from finance_manager.models.budget import (
    TOTAL_BUDGET_LABEL,
    Budget,
    BudgetBase,
    BudgetStatus,
    BudgetUsage,
    CategoryBudget,
    CategorySummary,
    TotalBudget,
    budget_for_category,
    first_instant_of_month,
    last_instant_of_month,
    parse_budget,
)
from finance_manager.models.transaction import (
    MONTH_KEY_FORMAT,
    Transaction,
)

__all__ = [
    # Transaction models
    "MONTH_KEY_FORMAT",
    "Transaction",
    # Budget models
    "TOTAL_BUDGET_LABEL",
    "Budget",
    "BudgetBase",
    "BudgetStatus",
    "BudgetUsage",
    "CategoryBudget",
    "CategorySummary",
    "TotalBudget",
    "budget_for_category",
    "first_instant_of_month",
    "last_instant_of_month",
    "parse_budget",
]
