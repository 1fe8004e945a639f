"""Google Sheets backend for the issue table.

Talks to the Sheets v4 REST API through an authorised ``requests`` session so
that transport calls stay out of the repository and tests can inject a mock.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any
from urllib.parse import quote

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from sheets_issue_tracker.errors import CredentialsError, StoreIOError
from sheets_issue_tracker.storage.table_store import Row, TableStore

logger = logging.getLogger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
DEFAULT_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"

_PLAIN_SHEET_NAME = re.compile(r"^[A-Za-z0-9_]+$")


def column_letter(index: int) -> str:
    """Return the A1 column letter for a 1-based column index (1 -> A, 27 -> AA)."""

    if index < 1:
        raise ValueError("column index must be positive")
    letters = ""
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def quote_sheet_name(name: str) -> str:
    if _PLAIN_SHEET_NAME.match(name):
        return name
    escaped = name.replace("'", "''")
    return f"'{escaped}'"


class GoogleSheetsTableStore(TableStore):
    """Table store backed by one sheet of a Google spreadsheet."""

    def __init__(
        self,
        *,
        spreadsheet_id: str,
        session: requests.Session,
        header: Sequence[str],
        sheet_name: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        if not spreadsheet_id:
            raise ValueError("spreadsheet_id is required")

        super().__init__(header)
        self._spreadsheet_id = spreadsheet_id
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

        self._sheet_name = sheet_name or self._first_sheet_name()
        logger.debug(
            "Using Google Sheets table",
            extra={"spreadsheet_id": spreadsheet_id, "sheet": self._sheet_name},
        )

    @classmethod
    def from_service_account_file(
        cls,
        credentials_file: Path,
        *,
        spreadsheet_id: str,
        header: Sequence[str],
        sheet_name: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
    ) -> GoogleSheetsTableStore:
        """Build a store authenticated with a service-account key file.

        Raises:
            CredentialsError: If the key file is missing or unreadable.
        """
        try:
            credentials = service_account.Credentials.from_service_account_file(
                str(credentials_file), scopes=[SHEETS_SCOPE]
            )
        except (OSError, ValueError, GoogleAuthError) as e:
            raise CredentialsError(
                f"Unable to load service account credentials from {credentials_file}: {e}"
            ) from e

        return cls(
            spreadsheet_id=spreadsheet_id,
            session=AuthorizedSession(credentials),
            header=header,
            sheet_name=sheet_name,
            base_url=base_url,
            timeout=timeout,
        )

    @property
    def sheet_name(self) -> str:
        return self._sheet_name

    def a1_range(self, first_row: int | None = None, last_row: int | None = None) -> str:
        """Return an A1 range covering the table columns, e.g. ``Sheet1!A1:F1``.

        Without row bounds the range spans whole columns (``Sheet1!A:F``).
        """
        last_column = column_letter(self.width)
        start = f"A{first_row}" if first_row is not None else "A"
        end_row = last_row if last_row is not None else first_row
        end = f"{last_column}{end_row}" if end_row is not None else last_column
        return f"{quote_sheet_name(self._sheet_name)}!{start}:{end}"

    def _spreadsheet_url(self) -> str:
        return f"{self._base_url}/{self._spreadsheet_id}"

    def _values_url(self, a1_range: str, suffix: str = "") -> str:
        return f"{self._spreadsheet_url()}/values/{quote(a1_range, safe='')}{suffix}"

    def _request(self, operation: str, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, GoogleAuthError, ValueError) as e:
            logger.error(
                "Google Sheets request failed",
                extra={"operation": operation, "method": method, "error": str(e)},
            )
            raise StoreIOError(operation, str(e)) from e

        if not isinstance(data, dict):
            raise StoreIOError(operation, "unexpected response shape")
        return data

    def _first_sheet_name(self) -> str:
        data = self._request(
            "resolve_sheet",
            "GET",
            self._spreadsheet_url(),
            params={"fields": "sheets.properties.title"},
        )
        sheets = data.get("sheets") or []
        for sheet in sheets:
            props = sheet.get("properties") if isinstance(sheet, dict) else None
            title = props.get("title") if isinstance(props, dict) else None
            if isinstance(title, str) and title:
                return title
        raise StoreIOError("resolve_sheet", "spreadsheet has no sheets")

    def _get_values(self, operation: str, a1_range: str) -> list[Row]:
        data = self._request(operation, "GET", self._values_url(a1_range))
        values = data.get("values") or []
        return [["" if cell is None else str(cell) for cell in row] for row in values]

    def _put_values(self, operation: str, a1_range: str, row: Sequence[str]) -> None:
        self._request(
            operation,
            "PUT",
            self._values_url(a1_range),
            params={"valueInputOption": "RAW"},
            json={"range": a1_range, "majorDimension": "ROWS", "values": [list(row)]},
        )

    def ensure_header(self) -> bool:
        header_range = self.a1_range(1)
        if self._get_values("ensure_header", header_range):
            logger.info("Header already exists, skipping initialization")
            return False

        self._put_values("ensure_header", header_range, self.header)
        logger.info("Header initialized", extra={"range": header_range})
        return True

    def append_row(self, row: Sequence[str]) -> None:
        table_range = self.a1_range()
        self._request(
            "append_row",
            "POST",
            self._values_url(table_range, ":append"),
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"range": table_range, "majorDimension": "ROWS", "values": [list(row)]},
        )
        logger.debug("Row appended", extra={"range": table_range})

    def read_all(self) -> list[Row]:
        rows = self._get_values("read_all", self.a1_range())
        logger.debug("Rows read", extra={"count": len(rows)})
        return rows

    def update_row(self, position: int, row: Sequence[str]) -> None:
        if position < 1:
            raise StoreIOError("update_row", f"invalid row position {position}")

        row_range = self.a1_range(position)
        self._put_values("update_row", row_range, row)
        logger.debug("Row updated", extra={"range": row_range})
