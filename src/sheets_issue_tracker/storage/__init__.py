"""Row-oriented table backends."""

from sheets_issue_tracker.storage.csv_file import CsvTableStore
from sheets_issue_tracker.storage.google_sheets import GoogleSheetsTableStore
from sheets_issue_tracker.storage.table_store import Row, TableStore

__all__ = [
    "CsvTableStore",
    "GoogleSheetsTableStore",
    "Row",
    "TableStore",
]
