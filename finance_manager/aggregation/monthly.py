"""
Monthly Aggregation

Buckets transactions by calendar month for time-series views.

DESIGN DECISION: Aggregation is two passes. The first pass generates
every month between the earliest and latest transaction, the second
adds amounts into those buckets. A chart built from the result never
has a missing month, even when nothing happened in it.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from finance_manager.models.transaction import MONTH_KEY_FORMAT, Transaction


def month_floor(moment: datetime) -> date:
    """First day of the month containing `moment`."""
    return date(moment.year, moment.month, 1)


def next_month(month: date) -> date:
    if month.month == 12:
        return date(month.year + 1, 1, 1)
    return date(month.year, month.month + 1, 1)


def month_keys_between(start: datetime, end: datetime) -> list[str]:
    """
    Every YYYY-MM key from the month of `start` to the month of `end`.

    Both ends are inclusive. Returns an empty list when end precedes start.
    """
    keys = []
    current = month_floor(start)
    last = month_floor(end)
    while current <= last:
        keys.append(current.strftime(MONTH_KEY_FORMAT))
        current = next_month(current)
    return keys


def date_span(transactions: Iterable[Transaction]) -> Optional[tuple[datetime, datetime]]:
    """Earliest and latest transaction date, or None when there are none."""
    earliest = None
    latest = None
    for transaction in transactions:
        if earliest is None or transaction.date < earliest:
            earliest = transaction.date
        if latest is None or transaction.date > latest:
            latest = transaction.date
    if earliest is None:
        return None
    return earliest, latest


def monthly_totals(
    transactions: Iterable[Transaction],
    income: bool,
) -> dict[str, Decimal]:
    """
    Sum of income or expense amounts per month, gap-filled.

    The month range spans all given transactions of either kind,
    so income and expense series line up on the same months.
    Keys are in chronological order.
    """
    transactions = list(transactions)
    span = date_span(transactions)
    if span is None:
        return {}

    totals = {key: Decimal("0") for key in month_keys_between(*span)}

    for transaction in transactions:
        if transaction.is_income == income:
            totals[transaction.month_key] += transaction.amount

    return totals


def in_month(transaction: Transaction, year: int, month: int) -> bool:
    """Whether the transaction falls in the given calendar month."""
    return transaction.date.year == year and transaction.date.month == month
