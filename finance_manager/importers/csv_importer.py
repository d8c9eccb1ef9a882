"""
CSV Transaction Importer

Reads transactions from a CSV export with the columns

    Date,Amount,Type,Category,Description

The first line is a header and is skipped. Columns are read by
position, so header names may differ. Quoted fields may contain commas.

CRITICAL: An import is all-or-nothing. The whole file is parsed into a
list before anything is returned, so a bad row aborts the import
before a single record reaches a store.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Optional, Union

import pandas as pd
from pydantic import ValidationError

from finance_manager.config import get_settings
from finance_manager.logger import get_logger
from finance_manager.models.transaction import Transaction


COLUMN_NAMES = ["Date", "Amount", "Type", "Category", "Description"]
INCOME_TYPE = "income"


class TransactionImportError(Exception):
    """Base exception for import errors."""
    pass


class MalformedRowError(TransactionImportError):
    """A row could not be turned into a transaction."""

    def __init__(self, row_number: int, column: str, value: Any, message: str):
        self.row_number = row_number
        self.column = column
        self.value = value
        super().__init__(f"Row {row_number}, column {column}: {message}")


class CsvTransactionImporter:
    """
    Produces fully-populated Transaction records from a CSV file.

    The importer never touches a store. The caller adds the returned
    records one at a time.
    """

    def __init__(
        self,
        date_format: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            date_format: strptime format of the Date column.
                         Defaults to the configured import format.
            clock: Supplies the date used when a row's date cannot be parsed.
        """
        self._date_format = date_format or get_settings().app.import_date_format
        self._clock = clock or datetime.now
        self._logger = get_logger(__name__)

    def import_transactions(self, path: Union[str, Path]) -> list[Transaction]:
        """
        Parse every row of the file.

        Raises:
            TransactionImportError: If the file cannot be read
            MalformedRowError: If any row is invalid
        """
        frame = self._read(path)

        transactions = []
        for row_number, row in enumerate(
            frame.itertuples(index=False, name=None), start=1
        ):
            transactions.append(self._parse_row(row_number, row))

        self._logger.info(
            "csv_import_parsed",
            path=str(path),
            row_count=len(transactions),
        )
        return transactions

    def _read(self, path: Union[str, Path]) -> pd.DataFrame:
        """Load the file as strings, keeping empty cells as ''."""
        try:
            frame = pd.read_csv(
                path,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except FileNotFoundError as e:
            raise TransactionImportError(f"CSV file not found: {path}") from e
        except pd.errors.EmptyDataError as e:
            raise TransactionImportError(f"CSV file is empty: {path}") from e
        except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
            raise TransactionImportError(f"Could not read CSV file {path}: {e}") from e

        if frame.shape[1] < len(COLUMN_NAMES):
            raise TransactionImportError(
                f"Expected {len(COLUMN_NAMES)} columns "
                f"({', '.join(COLUMN_NAMES)}), found {frame.shape[1]}"
            )

        return frame.iloc[:, :len(COLUMN_NAMES)]

    def _parse_row(self, row_number: int, row: tuple) -> Transaction:
        values = {}
        for column, value in zip(COLUMN_NAMES, row):
            if value is None or (not isinstance(value, str) and pd.isna(value)):
                raise MalformedRowError(row_number, column, value, "missing value")
            values[column] = value.strip()

        date = self._parse_date(row_number, values["Date"])
        amount = self._parse_amount(row_number, values["Amount"])
        try:
            return Transaction(
                date=date,
                amount=amount,
                is_income=values["Type"].lower() == INCOME_TYPE,
                category=values["Category"],
                description=values["Description"],
            )
        except ValidationError as e:
            raise MalformedRowError(row_number, "Category", values["Category"], str(e)) from e

    def _parse_date(self, row_number: int, value: str) -> datetime:
        """Parse the date, falling back to now when it is unreadable."""
        try:
            return datetime.strptime(value, self._date_format)
        except ValueError:
            fallback = self._clock()
            self._logger.warning(
                "csv_import_date_fallback",
                row_number=row_number,
                value=value,
                fallback=fallback.isoformat(),
            )
            return fallback

    def _parse_amount(self, row_number: int, value: str) -> Decimal:
        try:
            amount = Decimal(value)
        except InvalidOperation:
            raise MalformedRowError(
                row_number, "Amount", value, f"invalid amount value: {value!r}"
            )
        if not amount.is_finite():
            raise MalformedRowError(
                row_number, "Amount", value, f"invalid amount value: {value!r}"
            )
        if amount < 0:
            raise MalformedRowError(
                row_number, "Amount", value, "amount cannot be negative"
            )
        return amount
