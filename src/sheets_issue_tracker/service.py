"""Issue service: input validation in front of the repository."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from sheets_issue_tracker.errors import ValidationError
from sheets_issue_tracker.models import Issue, IssueStatus, generate_issue_id, utc_now
from sheets_issue_tracker.repository import IssueRepository

logger = logging.getLogger(__name__)


class IssueService:
    """Creates, updates and lists issues.

    All domain rules are checked here, before the repository is touched.
    """

    def __init__(
        self,
        repository: IssueRepository,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = generate_issue_id,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._id_factory = id_factory

    def create_issue(self, description: str | None, parent_id: str | None = None) -> Issue:
        """Create a new OPEN issue and persist it.

        Args:
            description: Issue description (required, non-blank).
            parent_id: Optional id of a parent issue. It is not checked for existence.

        Returns:
            The persisted issue.

        Raises:
            ValidationError: If the description is missing or blank.
        """
        if description is None or not description.strip():
            raise ValidationError("Description is required")

        issue = Issue(
            id=self._id_factory(),
            description=description,
            parent_id=parent_id,
            status=IssueStatus.OPEN,
            created_at=self._clock(),
            updated_at=None,
        )
        self._repository.create(issue)
        return issue

    def update_status(self, issue_id: str | None, status_text: str | None) -> bool:
        """Set the status of an existing issue.

        Returns:
            True if the issue was found and updated, False if no issue has that id.

        Raises:
            ValidationError: If the id is blank or the status is not recognised.
        """
        status = IssueStatus.parse(status_text)
        if issue_id is None or not issue_id.strip():
            raise ValidationError("Issue ID is required")

        updated = self._repository.update_status(issue_id, status)
        if not updated:
            logger.warning("No issue with that ID", extra={"issue_id": issue_id})
        return updated

    def list_by_status(self, status_text: str | None) -> list[Issue]:
        """Return all issues with the given status, in storage order.

        Raises:
            ValidationError: If the status is not recognised.
        """
        status = IssueStatus.parse(status_text)
        return self._repository.find_by_status(status)
