"""Issue entity and status vocabulary."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sheets_issue_tracker.errors import ValidationError

ISSUE_ID_PREFIX = "AD-"

# Fixed column layout (A-F) of the issue table.
ISSUE_HEADER: tuple[str, ...] = (
    "ID",
    "Description",
    "Parent ID",
    "Status",
    "Created at",
    "Updated at",
)


class IssueStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"

    @classmethod
    def allowed(cls) -> str:
        return ", ".join(member.value for member in cls)

    @classmethod
    def parse(cls, text: str | None) -> IssueStatus:
        """Parse a status token case-insensitively.

        Raises:
            ValidationError: If the token is not one of the known statuses.
        """
        token = (text or "").strip()
        for member in cls:
            if member.value == token.upper():
                return member
        raise ValidationError(f"Invalid status: {text} (allowed: {cls.allowed()})")


class Issue(BaseModel):
    """A trackable unit of work.

    Cells read back from the table arrive as strings, so the validators below
    accept the stored encodings: empty strings for absent optional values,
    status tokens in any case and ISO-8601 timestamps (naive values are UTC).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    parent_id: str | None = Field(default=None)
    status: IssueStatus = Field(default=IssueStatus.OPEN)
    created_at: datetime | None = Field(default=None)
    updated_at: datetime | None = Field(default=None)

    @field_validator("id", "description")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("parent_id", mode="before")
    @classmethod
    def _blank_parent_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("status", mode="before")
    @classmethod
    def _normalise_status(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _blank_timestamp_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


def utc_now() -> datetime:
    return datetime.now(UTC)


def generate_issue_id() -> str:
    """Return a new id of the form ``AD-XXXXXXXX`` (8 upper-case hex characters)."""

    return ISSUE_ID_PREFIX + uuid.uuid4().hex[:8].upper()
