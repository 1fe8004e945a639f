"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from datetime import UTC, datetime, timedelta

import pytest

from sheets_issue_tracker.models import ISSUE_HEADER
from sheets_issue_tracker.repository import IssueRepository
from sheets_issue_tracker.service import IssueService
from sheets_issue_tracker.storage.table_store import Row, TableStore


class InMemoryTableStore(TableStore):
    """Table store double that keeps rows in a list and counts writes."""

    def __init__(self, rows: Sequence[Sequence[str]] | None = None) -> None:
        super().__init__(ISSUE_HEADER)
        self.rows: list[Row] = [list(row) for row in rows or []]
        self.writes: list[tuple[str, int | None, Row]] = []

    def ensure_header(self) -> bool:
        if self.rows:
            return False
        self.rows.append(list(self.header))
        self.writes.append(("ensure_header", 1, list(self.header)))
        return True

    def append_row(self, row: Sequence[str]) -> None:
        self.rows.append(list(row))
        self.writes.append(("append_row", None, list(row)))

    def read_all(self) -> list[Row]:
        return [list(row) for row in self.rows]

    def update_row(self, position: int, row: Sequence[str]) -> None:
        self.rows[position - 1] = list(row)
        self.writes.append(("update_row", position, list(row)))


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Provide a clock that advances one second per call."""

    def ticks() -> Iterator[datetime]:
        current = datetime(2025, 1, 1, 9, 0, tzinfo=UTC)
        while True:
            yield current
            current += timedelta(seconds=1)

    it = ticks()
    return lambda: next(it)


@pytest.fixture
def table() -> InMemoryTableStore:
    """Provide an empty in-memory table with its header written."""
    store = InMemoryTableStore()
    store.ensure_header()
    store.writes.clear()
    return store


@pytest.fixture
def repository(table: InMemoryTableStore, clock: Callable[[], datetime]) -> IssueRepository:
    return IssueRepository(table, clock=clock)


@pytest.fixture
def service(repository: IssueRepository, clock: Callable[[], datetime]) -> IssueService:
    return IssueService(repository, clock=clock)


@pytest.fixture
def empty_table() -> InMemoryTableStore:
    """Provide an in-memory table without even a header row."""
    return InMemoryTableStore()


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo handler changes made by `configure_logging` during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
