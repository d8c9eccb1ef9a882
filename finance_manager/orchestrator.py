"""
Main Orchestrator for Finance Manager

Ties the stores to their collaborators and defines the two flows that
reach outside the process:
1. CSV import (file → parsed records → one add per record)
2. Advice (stores → prompt → worker thread → owner-thread callbacks)

DESIGN DECISION: The orchestrator enforces the boundaries:
- An import commits nothing unless the whole file parsed
- Advice reads stores but never writes them
"""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

from finance_manager.advice import (
    AdviceChannel,
    AdviceConsultant,
    build_advice_prompt,
)
from finance_manager.config import get_settings
from finance_manager.importers import CsvTransactionImporter
from finance_manager.logger import configure_logging, get_logger
from finance_manager.models.budget import TotalBudget
from finance_manager.models.transaction import Transaction
from finance_manager.stores import BudgetStore, Clock, TransactionStore


@dataclass
class ImportResult:
    """Outcome of a completed CSV import."""

    path: str
    transactions: list[Transaction] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.transactions)


class ImportFlow:
    """
    Orchestrates CSV import into the transaction store.

    Flow:
    1. Parse the entire file (errors abort here, nothing committed)
    2. Add each record to the store (one notification per record)
    """

    def __init__(
        self,
        transaction_store: TransactionStore,
        importer: Optional[CsvTransactionImporter] = None,
    ):
        self._transaction_store = transaction_store
        self._importer = importer or CsvTransactionImporter()
        self._logger = get_logger(__name__)

    def import_csv(self, path: Union[str, Path]) -> ImportResult:
        """
        Import every transaction in the file.

        Raises:
            TransactionImportError: If the file or any row is invalid.
                The store is left unchanged.
        """
        try:
            parsed = self._importer.import_transactions(path)
        except Exception as e:
            self._logger.error("csv_import_failed", path=str(path), error=str(e))
            raise

        result = ImportResult(path=str(path))
        for transaction in parsed:
            result.transactions.append(self._transaction_store.add(transaction))

        self._logger.info(
            "csv_import_committed",
            path=str(path),
            imported_count=result.imported_count,
        )
        return result


class AdviceFlow:
    """
    Orchestrates advice requests and the single total budget.

    The prompt is built on the calling thread from live store data.
    The request itself runs on the channel's worker thread.
    """

    def __init__(
        self,
        budget_store: BudgetStore,
        consultant: Optional[AdviceConsultant] = None,
        currency_symbol: Optional[str] = None,
    ):
        self._budget_store = budget_store
        self._consultant = consultant or AdviceConsultant()
        self._currency_symbol = currency_symbol
        self._logger = get_logger(__name__)

    def build_prompt(self) -> str:
        return build_advice_prompt(self._budget_store, self._currency_symbol)

    def request_advice(self, queue_size: Optional[int] = None) -> AdviceChannel:
        """
        Start an advice request.

        Returns:
            A started channel. The caller drains it on its own thread.
        """
        prompt = self.build_prompt()
        self._logger.info("advice_flow_started", prompt_chars=len(prompt))
        return AdviceChannel(self._consultant, prompt, queue_size=queue_size).start()

    def set_total_budget(self, amount: Decimal, description: str = "") -> TotalBudget:
        """
        Create or replace the monthly total budget.

        The store allows several TotalBudgets; this keeps it to one by
        updating the existing one when present.
        """
        existing = self._budget_store.get_total_budget()
        if existing is None:
            return self._budget_store.add(
                TotalBudget(amount=amount, description=description)
            )

        updated = TotalBudget(
            id=existing.id,
            amount=amount,
            start_date=existing.start_date,
            end_date=existing.end_date,
            description=description,
        )
        self._budget_store.update(updated)
        return updated


@dataclass
class AppComponents:
    """Everything a front end needs, wired together."""

    transaction_store: TransactionStore
    budget_store: BudgetStore
    import_flow: ImportFlow
    advice_flow: AdviceFlow


def create_app_components(
    consultant: Optional[AdviceConsultant] = None,
    clock: Optional[Clock] = None,
    setup_logging: bool = True,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        consultant: Advice client. Defaults to one built from settings
                    (offline canned answers when no API key is set).
        clock: Clock for the budget store's "current month".
        setup_logging: Configure stdlib logging from settings.
    """
    settings = get_settings()
    if setup_logging:
        configure_logging(settings.app.log_level)

    transaction_store = TransactionStore()
    budget_store = BudgetStore(transaction_store, clock=clock)

    return AppComponents(
        transaction_store=transaction_store,
        budget_store=budget_store,
        import_flow=ImportFlow(transaction_store),
        advice_flow=AdviceFlow(
            budget_store,
            consultant=consultant,
            currency_symbol=settings.app.currency_symbol,
        ),
    )
