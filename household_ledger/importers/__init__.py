"""Bulk import and export of transactions as CSV."""

from household_ledger.importers.csv_export import EXPORT_COLUMNS, export_transactions_csv
from household_ledger.importers.csv_import import ImportReport, read_rows, row_to_draft

__all__ = [
    "EXPORT_COLUMNS",
    "ImportReport",
    "export_transactions_csv",
    "read_rows",
    "row_to_draft",
]
