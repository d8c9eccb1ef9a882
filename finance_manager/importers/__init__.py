"""Importers package."""

from finance_manager.importers.csv_importer import (
    COLUMN_NAMES,
    CsvTransactionImporter,
    MalformedRowError,
    TransactionImportError,
)

__all__ = [
    "COLUMN_NAMES",
    "CsvTransactionImporter",
    "MalformedRowError",
    "TransactionImportError",
]
