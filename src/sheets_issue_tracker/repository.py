"""Issue repository over a row-oriented table store.

The table has no index, so lookups are full scans in storage order. Row 1 is
the header; a data row found at scan index ``i`` lives at storage position
``i + 1``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

import pydantic

from sheets_issue_tracker.errors import RepositoryError, RowDecodeError, StoreIOError
from sheets_issue_tracker.models import ISSUE_HEADER, Issue, IssueStatus, utc_now
from sheets_issue_tracker.storage.table_store import Row, TableStore

logger = logging.getLogger(__name__)

ROW_WIDTH = len(ISSUE_HEADER)

ID_COLUMN = 0
DESCRIPTION_COLUMN = 1
PARENT_ID_COLUMN = 2
STATUS_COLUMN = 3
CREATED_AT_COLUMN = 4
UPDATED_AT_COLUMN = 5


def format_timestamp(value: datetime | None) -> str:
    return value.isoformat() if value is not None else ""


def issue_to_row(issue: Issue) -> Row:
    """Encode an issue as the six table cells."""

    return [
        issue.id,
        issue.description,
        issue.parent_id or "",
        issue.status.value,
        format_timestamp(issue.created_at),
        format_timestamp(issue.updated_at),
    ]


def row_to_issue(row: Sequence[object], *, position: int) -> Issue:
    """Decode table cells into an issue.

    Missing trailing cells decode as absent values.

    Raises:
        RowDecodeError: If a cell cannot be decoded (unknown status token,
            bad timestamp, blank id or description).
    """

    cells = ["" if cell is None else str(cell) for cell in row]
    cells += [""] * (ROW_WIDTH - len(cells))

    try:
        return Issue.model_validate(
            {
                "id": cells[ID_COLUMN],
                "description": cells[DESCRIPTION_COLUMN],
                "parent_id": cells[PARENT_ID_COLUMN],
                "status": cells[STATUS_COLUMN],
                "created_at": cells[CREATED_AT_COLUMN],
                "updated_at": cells[UPDATED_AT_COLUMN],
            }
        )
    except pydantic.ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise RowDecodeError(position, problems) from e


def _is_blank(row: Sequence[object]) -> bool:
    return all(cell is None or not str(cell).strip() for cell in row)


class IssueRepository:
    """Maps issues to rows of a :class:`TableStore`."""

    def __init__(
        self,
        store: TableStore,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._clock = clock

    def create(self, issue: Issue) -> None:
        """Append the issue as a new row. Id collisions are not checked."""

        row = issue_to_row(issue)
        try:
            self._store.append_row(row)
        except StoreIOError as e:
            raise RepositoryError("create", e.detail, issue_id=issue.id) from e

        logger.info("Issue created", extra={"issue_id": issue.id, "status": issue.status.value})

    def update_status(self, issue_id: str, status: IssueStatus) -> bool:
        """Rewrite the status and updated-at cells of the first row with ``issue_id``.

        Returns:
            True if a row matched and was rewritten, False otherwise. Nothing is
            written when no row matches.
        """

        rows = self._read_all("update_status", issue_id=issue_id)
        if not rows:
            return False

        for index, row in enumerate(rows[1:], start=1):
            if not row or str(row[ID_COLUMN]) != issue_id:
                continue

            updated = ["" if cell is None else str(cell) for cell in row]
            updated += [""] * (ROW_WIDTH - len(updated))
            updated[STATUS_COLUMN] = status.value
            updated[UPDATED_AT_COLUMN] = format_timestamp(self._clock())

            position = index + 1
            try:
                self._store.update_row(position, updated)
            except StoreIOError as e:
                raise RepositoryError("update_status", e.detail, issue_id=issue_id) from e

            logger.info(
                "Issue status updated",
                extra={"issue_id": issue_id, "status": status.value, "position": position},
            )
            return True

        logger.info("Issue not found", extra={"issue_id": issue_id, "scanned": len(rows) - 1})
        return False

    def find_by_status(self, status: IssueStatus) -> list[Issue]:
        """Return issues with ``status`` in storage order.

        Every data row is decoded, so a single malformed row fails the call.
        Rows whose cells are all blank are skipped.

        Raises:
            RowDecodeError: If any non-blank row cannot be decoded.
        """

        rows = self._read_all("find_by_status")
        if not rows:
            return []

        issues = [
            row_to_issue(row, position=index + 1)
            for index, row in enumerate(rows[1:], start=1)
            if not _is_blank(row)
        ]
        matches = [issue for issue in issues if issue.status is status]
        logger.debug(
            "Issues filtered by status",
            extra={"status": status.value, "scanned": len(issues), "matched": len(matches)},
        )
        return matches

    def _read_all(self, operation: str, *, issue_id: str | None = None) -> list[Row]:
        try:
            return self._store.read_all()
        except StoreIOError as e:
            raise RepositoryError(operation, e.detail, issue_id=issue_id) from e
