"""Error types raised by the tracker.

Validation problems are raised before any I/O. Store failures carry the
operation (and issue id when known) and chain the transport error as their cause.
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for all tracker errors."""


class ValidationError(TrackerError, ValueError):
    """Invalid or missing caller input."""


class CredentialsError(TrackerError):
    """Credentials for the backing store could not be loaded."""


class StoreIOError(TrackerError):
    """A read or write against the backing table failed."""

    def __init__(self, operation: str, detail: str = "", *, issue_id: str | None = None) -> None:
        self.operation = operation
        self.detail = detail
        self.issue_id = issue_id
        super().__init__(str(self))

    def __str__(self) -> str:
        message = f"Store operation '{self.operation}' failed"
        if self.issue_id:
            message += f" for issue {self.issue_id}"
        if self.detail:
            message += f": {self.detail}"
        return message


class RepositoryError(StoreIOError):
    """A store failure surfaced through the issue repository."""


class RowDecodeError(TrackerError, ValueError):
    """A stored row could not be decoded into an issue."""

    def __init__(self, position: int, reason: str) -> None:
        self.position = position
        self.reason = reason
        super().__init__(f"Row {position} is malformed: {reason}")
