"""
Transaction Store

Owns the in-memory transaction collection. Exposes add, filtered
snapshots, all-time totals, and month/category aggregations.

DESIGN DECISION: Every read returns a new list or dict. Records are
frozen pydantic models, so a snapshot can be handed to a view without
the view being able to change what the store holds.

Transactions cannot be updated or deleted once added.
"""

import threading
from datetime import datetime
from decimal import Decimal

from finance_manager.aggregation import (
    in_month,
    monthly_totals,
    sum_amounts,
    totals_by_category,
)
from finance_manager.logger import get_logger
from finance_manager.models.transaction import Transaction, to_naive_local
from finance_manager.stores.observers import (
    DataObserver,
    ObserverFailure,
    ObserverRegistry,
)


class TransactionStore:
    """
    In-memory transaction storage with change notification.

    GUARANTEES:
    - Ids start at 1 and increase by one per add, never reused
    - Observers are notified once per add, before add returns
    - Aggregations over an empty store return zero or empty results
    """

    def __init__(self):
        self._transactions: list[Transaction] = []
        self._next_id = 1
        self._lock = threading.RLock()
        self._observers = ObserverRegistry(source="transaction_store")
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

    def add(self, transaction: Transaction) -> Transaction:
        """
        Add a transaction.

        Whatever id the incoming record carries is replaced by the
        next sequential id.

        Returns:
            The stored record, carrying its assigned id
        """
        with self._lock:
            stored = transaction.model_copy(update={"id": self._next_id})
            self._next_id += 1
            self._transactions.append(stored)

            self._logger.info(
                "transaction_added",
                transaction_id=stored.id,
                category=stored.category,
                amount=str(stored.amount),
                is_income=stored.is_income,
            )

            self._notify_observers()
        return stored

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._transactions)

    def count(self) -> int:
        return len(self)

    def get_all(self) -> list[Transaction]:
        """
        All transactions, most recent first.

        The sort is stable, so transactions with the same date keep
        the order they were added in.
        """
        with self._lock:
            return sorted(self._transactions, key=lambda t: t.date, reverse=True)

    def get_by_category(self, category: str) -> list[Transaction]:
        with self._lock:
            return [t for t in self._transactions if t.category == category]

    def get_by_type(self, is_income: bool) -> list[Transaction]:
        with self._lock:
            return [t for t in self._transactions if t.is_income == is_income]

    def get_by_date_range(self, start: datetime, end: datetime) -> list[Transaction]:
        """Transactions dated between start and end, both inclusive."""
        start = to_naive_local(start)
        end = to_naive_local(end)
        with self._lock:
            return [t for t in self._transactions if start <= t.date <= end]

    def get_by_month(self, year: int, month: int) -> list[Transaction]:
        """Transactions in one calendar month, in insertion order."""
        with self._lock:
            return [t for t in self._transactions if in_month(t, year, month)]

    # -------------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------------

    def get_total_income(self) -> Decimal:
        """Sum of all income, across all time."""
        return sum_amounts(self.get_by_type(True))

    def get_total_expense(self) -> Decimal:
        """Sum of all expenses, across all time."""
        return sum_amounts(self.get_by_type(False))

    def get_net_balance(self) -> Decimal:
        with self._lock:
            return self.get_total_income() - self.get_total_expense()

    # -------------------------------------------------------------------------
    # Aggregations
    # -------------------------------------------------------------------------

    def get_monthly_income(self) -> dict[str, Decimal]:
        """
        Income per YYYY-MM month, chronological and gap-filled.

        Every month from the earliest to the latest transaction is
        present, with zero where there was no income.
        """
        with self._lock:
            return monthly_totals(self._transactions, income=True)

    def get_monthly_expenses(self) -> dict[str, Decimal]:
        """Expenses per YYYY-MM month, chronological and gap-filled."""
        with self._lock:
            return monthly_totals(self._transactions, income=False)

    def get_income_by_category(self) -> dict[str, Decimal]:
        with self._lock:
            return totals_by_category(self._transactions, income=True)

    def get_expense_by_category(self) -> dict[str, Decimal]:
        with self._lock:
            return totals_by_category(self._transactions, income=False)
