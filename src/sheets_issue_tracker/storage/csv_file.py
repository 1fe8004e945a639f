"""CSV-file backed table store for local, offline use."""

from __future__ import annotations

import csv
import logging
from collections.abc import Sequence
from pathlib import Path

from sheets_issue_tracker.errors import StoreIOError
from sheets_issue_tracker.storage.table_store import Row, TableStore

logger = logging.getLogger(__name__)


class CsvTableStore(TableStore):
    """Table store kept in a single UTF-8 CSV file."""

    def __init__(self, path: Path, header: Sequence[str]) -> None:
        super().__init__(header)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _load(self, operation: str) -> list[Row]:
        if not self._path.exists():
            return []
        # newline="" keeps carriage returns inside quoted cells intact.
        try:
            with self._path.open(encoding="utf-8", newline="") as f:
                return [list(row) for row in csv.reader(f)]
        except OSError as e:
            raise StoreIOError(operation, str(e)) from e

    def _dump(self, operation: str, rows: list[Row]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8", newline="") as f:
                csv.writer(f).writerows(rows)
        except OSError as e:
            raise StoreIOError(operation, str(e)) from e

    def ensure_header(self) -> bool:
        rows = self._load("ensure_header")
        if rows and any(cell for cell in rows[0]):
            logger.info("Header already exists, skipping initialization")
            return False

        if rows:
            rows[0] = list(self.header)
        else:
            rows = [list(self.header)]
        self._dump("ensure_header", rows)
        logger.info("Header initialized", extra={"path": str(self._path)})
        return True

    def append_row(self, row: Sequence[str]) -> None:
        rows = self._load("append_row")
        rows.append(list(row))
        self._dump("append_row", rows)

    def read_all(self) -> list[Row]:
        return self._load("read_all")

    def update_row(self, position: int, row: Sequence[str]) -> None:
        rows = self._load("update_row")
        if position < 1 or position > len(rows):
            raise StoreIOError("update_row", f"invalid row position {position}")

        rows[position - 1] = list(row)
        self._dump("update_row", rows)
