#!/usr/bin/env python3
"""Programmatic usage example.

This wires the tracker components by hand instead of going through the CLI:

* load settings from `.env`
* open the configured table store and make sure the header exists
* create an issue, move it to IN_PROGRESS and list what is in progress

Set `ISSUE_TRACKER_BACKEND=csv` to try it without a Google spreadsheet.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from sheets_issue_tracker.config import TrackerSettings
from sheets_issue_tracker.logging import configure_logging
from sheets_issue_tracker.main import format_issue, open_store
from sheets_issue_tracker.repository import IssueRepository
from sheets_issue_tracker.service import IssueService


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create and start an issue")
    parser.add_argument("description", help="Description of the new issue")
    parser.add_argument("--parent-id", default=None, help="Optional parent issue ID")
    args = parser.parse_args(argv)

    settings = TrackerSettings()
    configure_logging(settings.log_level)

    service = IssueService(IssueRepository(open_store(settings)))

    issue = service.create_issue(args.description, args.parent_id)
    print(f"Created issue {issue.id}")

    service.update_status(issue.id, "IN_PROGRESS")
    for item in service.list_by_status("IN_PROGRESS"):
        print(format_issue(item))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
