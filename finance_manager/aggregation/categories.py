"""Category rollups over transactions."""

from decimal import Decimal
from typing import Iterable, Optional

from finance_manager.models.transaction import Transaction


def sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), Decimal("0"))


def totals_by_category(
    transactions: Iterable[Transaction],
    income: Optional[bool] = None,
) -> dict[str, Decimal]:
    """
    Sum amounts per category, in first-seen order.

    Args:
        transactions: Transactions to roll up
        income: True for income only, False for expenses only,
                None for both kinds together
    """
    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if income is not None and transaction.is_income != income:
            continue
        totals[transaction.category] = (
            totals.get(transaction.category, Decimal("0")) + transaction.amount
        )
    return totals
