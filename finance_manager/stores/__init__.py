"""
Stores Package

In-memory transaction and budget stores. Both notify registered
observers synchronously after every mutation.
"""

from finance_manager.stores.budget_store import BudgetStore, Clock
from finance_manager.stores.observers import (
    DataObserver,
    ObserverFailure,
    ObserverRegistry,
)
from finance_manager.stores.transaction_store import TransactionStore

__all__ = [
    "BudgetStore",
    "Clock",
    "DataObserver",
    "ObserverFailure",
    "ObserverRegistry",
    "TransactionStore",
]
