"""
Budget Store

Owns budget definitions and computes how much of each budget has been
spent, reading live from the linked TransactionStore.

DESIGN DECISION: Spending is never cached. Every usage query re-reads
the current month's transactions, so a budget view is correct as soon
as the transaction store notifies it.

KNOWN LIMITATION: Spending is measured against the calendar month of
the store's clock at query time. A budget's own start_date/end_date
are not consulted.
"""

import threading
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from finance_manager.aggregation import (
    classify_usage,
    sum_amounts,
    usage_percentage,
)
from finance_manager.logger import get_logger
from finance_manager.models.budget import (
    Budget,
    BudgetUsage,
    CategoryBudget,
    CategorySummary,
    TotalBudget,
)
from finance_manager.models.transaction import Transaction
from finance_manager.stores.observers import (
    DataObserver,
    ObserverFailure,
    ObserverRegistry,
)
from finance_manager.stores.transaction_store import TransactionStore


Clock = Callable[[], datetime]


class BudgetStore:
    """
    In-memory budget storage with change notification.

    add, update and delete each notify observers exactly once, including
    update and delete calls whose id matches nothing.

    The store does not enforce a single TotalBudget. Callers that want
    one should check get_total_budget() before adding.
    """

    def __init__(
        self,
        transaction_store: TransactionStore,
        clock: Optional[Clock] = None,
    ):
        """
        Args:
            transaction_store: Source of transactions for spending figures.
            clock: Returns "now"; decides which month is current.
                   Defaults to datetime.now.
        """
        self._transaction_store = transaction_store
        self._clock = clock or datetime.now
        self._budgets: list[Budget] = []
        self._next_id = 1
        self._lock = threading.RLock()
        self._observers = ObserverRegistry(source="budget_store")
        self._logger = get_logger(__name__)

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def add_observer(self, observer: DataObserver) -> None:
        """Register a callable to be invoked after every change."""
        self._observers.add(observer)

    def remove_observer(self, observer: DataObserver) -> None:
        self._observers.remove(observer)

    def _notify_observers(self) -> list[ObserverFailure]:
        return self._observers.notify()

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add(self, budget: Budget) -> Budget:
        """
        Add a budget and assign it the next id.

        Returns:
            The stored budget, carrying its assigned id
        """
        with self._lock:
            stored = budget.model_copy(update={"id": self._next_id})
            self._next_id += 1
            self._budgets.append(stored)

            self._logger.info(
                "budget_added",
                budget_id=stored.id,
                kind=stored.kind,
                label=stored.label,
                amount=str(stored.amount),
            )

            self._notify_observers()
        return stored

    def update(self, budget: Budget) -> bool:
        """
        Replace the budget that has the same id.

        The whole record is replaced, including its kind. An unknown
        id changes nothing but observers are still notified.

        Returns:
            True if a budget was replaced
        """
        with self._lock:
            replaced = False
            for index, existing in enumerate(self._budgets):
                if existing.id == budget.id:
                    self._budgets[index] = budget
                    replaced = True
                    break

            if replaced:
                self._logger.info(
                    "budget_updated",
                    budget_id=budget.id,
                    label=budget.label,
                    amount=str(budget.amount),
                )
            else:
                self._logger.debug("budget_update_missed", budget_id=budget.id)

            self._notify_observers()
        return replaced

    def delete(self, budget_id: int) -> bool:
        """
        Remove the budget with this id, if any.

        Observers are notified whether or not something was removed.

        Returns:
            True if a budget was removed
        """
        with self._lock:
            before = len(self._budgets)
            self._budgets = [b for b in self._budgets if b.id != budget_id]
            removed = len(self._budgets) < before

            if removed:
                self._logger.info("budget_deleted", budget_id=budget_id)
            else:
                self._logger.debug("budget_delete_missed", budget_id=budget_id)

            self._notify_observers()
        return removed

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._budgets)

    def get_all(self) -> list[Budget]:
        """All budgets in the order they were added."""
        with self._lock:
            return list(self._budgets)

    def get_by_id(self, budget_id: int) -> Optional[Budget]:
        with self._lock:
            for budget in self._budgets:
                if budget.id == budget_id:
                    return budget
        return None

    def get_by_category(self, category: str) -> list[CategoryBudget]:
        """All category budgets for this category (there may be several)."""
        with self._lock:
            return [
                b for b in self._budgets
                if isinstance(b, CategoryBudget) and b.category == category
            ]

    def get_category_budgets(self) -> list[CategoryBudget]:
        with self._lock:
            return [b for b in self._budgets if isinstance(b, CategoryBudget)]

    def get_total_budget(self) -> Optional[TotalBudget]:
        """The first TotalBudget, or None if there is none."""
        with self._lock:
            for budget in self._budgets:
                if isinstance(budget, TotalBudget):
                    return budget
        return None

    # -------------------------------------------------------------------------
    # Spending
    # -------------------------------------------------------------------------

    def _current_month_expenses(self) -> list[Transaction]:
        now = self._clock()
        return [
            t for t in self._transaction_store.get_by_month(now.year, now.month)
            if not t.is_income
        ]

    def get_current_month_total_expense(self) -> Decimal:
        """All expenses in the current calendar month."""
        return sum_amounts(self._current_month_expenses())

    def calculate_spending(self, budget: Budget) -> Decimal:
        """
        Current-month expenses counted against this budget.

        A category budget counts expenses in its category; the total
        budget counts every expense. Income is never counted.
        """
        expenses = self._current_month_expenses()
        if isinstance(budget, CategoryBudget):
            expenses = [t for t in expenses if t.category == budget.category]
        return sum_amounts(expenses)

    def calculate_remaining(self, budget: Budget) -> Decimal:
        """Allocated minus spent. Negative when overspent."""
        return budget.amount - self.calculate_spending(budget)

    def calculate_usage_percentage(self, budget: Budget) -> float:
        """
        Spending as a percentage of the budget amount.

        0.0 when the amount is zero or less; may exceed 100.
        """
        if budget.amount <= 0:
            return 0.0
        return usage_percentage(self.calculate_spending(budget), budget.amount)

    def get_usage(self, budget: Budget) -> BudgetUsage:
        """Spent, remaining, percentage and status of one budget."""
        spent = self.calculate_spending(budget)
        percentage = usage_percentage(spent, budget.amount)
        return BudgetUsage(
            budget=budget,
            spent=spent,
            remaining=budget.amount - spent,
            percentage=percentage,
            status=classify_usage(percentage),
        )

    def get_summary(self) -> dict[str, CategorySummary]:
        """
        Current-month summary of every category budget, keyed by category.

        The total budget is left out. If two budgets share a category,
        the one added later wins.
        """
        summary = {}
        for budget in self.get_category_budgets():
            usage = self.get_usage(budget)
            summary[budget.category] = CategorySummary(
                budget=budget.amount,
                spent=usage.spent,
                remaining=usage.remaining,
                percentage=usage.percentage,
                status=usage.status,
            )
        return summary
