"""
Advice Prompt Builder

Turns the current month's budget position into the free-text prompt
sent to the advice service. Only read-only store queries are used.
"""

from decimal import Decimal
from typing import Optional

from finance_manager.config import get_settings
from finance_manager.stores.budget_store import BudgetStore


PROMPT_HEADER = "I want financial advice based on my budget and spending. Here is my data:"
PROMPT_REQUEST = (
    "Based on this information, please provide me with financial advice, "
    "suggestions for budget adjustments, and spending optimization. Identify "
    "potential areas of concern and where I'm doing well."
)


def _money(symbol: str, amount: Decimal) -> str:
    return f"{symbol}{amount:,.2f}"


def build_advice_prompt(
    budget_store: BudgetStore,
    currency_symbol: Optional[str] = None,
) -> str:
    """
    Build the advice prompt.

    Includes the total monthly budget (0 when none is set), this month's
    total spending and what remains, then one line per category budget
    with its allocation, spending and percentage used.
    """
    symbol = currency_symbol if currency_symbol is not None else get_settings().app.currency_symbol

    total_budget = budget_store.get_total_budget()
    total_amount = total_budget.amount if total_budget else Decimal("0")
    total_spent = budget_store.get_current_month_total_expense()

    lines = [
        PROMPT_HEADER,
        "",
        f"Total monthly budget: {_money(symbol, total_amount)}",
        f"Total spent this month: {_money(symbol, total_spent)}",
        f"Remaining: {_money(symbol, total_amount - total_spent)}",
        "",
        "Category breakdown:",
    ]

    for budget in budget_store.get_category_budgets():
        spent = budget_store.calculate_spending(budget)
        percentage = budget_store.calculate_usage_percentage(budget)
        lines.append(
            f"- {budget.category}: Budget {_money(symbol, budget.amount)}, "
            f"Spent {_money(symbol, spent)} ({percentage:.1f}%)"
        )

    lines.append("")
    lines.append(PROMPT_REQUEST)
    return "\n".join(lines)
