"""Factory for creating table stores."""

import logging

from sheets_issue_tracker.config import TrackerSettings
from sheets_issue_tracker.models import ISSUE_HEADER
from sheets_issue_tracker.storage.csv_file import CsvTableStore
from sheets_issue_tracker.storage.google_sheets import GoogleSheetsTableStore
from sheets_issue_tracker.storage.table_store import TableStore

logger = logging.getLogger(__name__)


def create_table_store(settings: TrackerSettings) -> TableStore:
    """Create the issue table store selected by configuration.

    Raises:
        CredentialsError: If the Google credentials cannot be loaded.
        StoreIOError: If the spreadsheet cannot be reached.
        ValueError: If the backend type is not supported.
    """
    logger.info("Creating table store", extra={"backend": settings.backend})

    if settings.backend == "sheets":
        return GoogleSheetsTableStore.from_service_account_file(
            settings.credentials_file,
            spreadsheet_id=settings.spreadsheet_id,
            header=ISSUE_HEADER,
            sheet_name=settings.sheet_name,
            base_url=settings.sheets_base_url,
            timeout=settings.request_timeout,
        )
    elif settings.backend == "csv":
        return CsvTableStore(settings.csv_path, ISSUE_HEADER)
    else:
        raise ValueError(f"Unsupported storage backend: {settings.backend}")
