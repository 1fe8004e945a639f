"""CLI entrypoint for the issue tracker.

Commands:
  create --description <text> [--parentId <id>]
  update --id <issueId> --status <OPEN|IN_PROGRESS|CLOSED>
  list --status <OPEN|IN_PROGRESS|CLOSED>
  init
"""

from __future__ import annotations

import argparse
import logging
import sys

import pydantic

from sheets_issue_tracker import __version__
from sheets_issue_tracker.config import TrackerSettings
from sheets_issue_tracker.errors import (
    CredentialsError,
    RowDecodeError,
    StoreIOError,
    ValidationError,
)
from sheets_issue_tracker.logging import configure_logging
from sheets_issue_tracker.models import Issue, IssueStatus
from sheets_issue_tracker.repository import IssueRepository
from sheets_issue_tracker.service import IssueService
from sheets_issue_tracker.storage.factory import create_table_store
from sheets_issue_tracker.storage.table_store import TableStore

logger = logging.getLogger(__name__)

_STATUS_METAVAR = "|".join(status.value for status in IssueStatus)

# Flags each command cannot run without, as (attribute, flag) pairs.
_REQUIRED_FLAGS: dict[str, list[tuple[str, str]]] = {
    "create": [("description", "--description")],
    "update": [("id", "--id"), ("status", "--status")],
    "list": [("status", "--status")],
    "init": [],
}


def _optional_value(
    parser: argparse.ArgumentParser, *flags: str, dest: str, help_text: str
) -> None:
    # A flag given without a value parses as None, same as an omitted flag.
    parser.add_argument(*flags, dest=dest, nargs="?", default=None, const=None, help=help_text)


def join_flag_values(argv: list[str]) -> list[str]:
    """Rewrite `--key value` pairs after the command as `--key=value`.

    Only `--` tokens are flags, so a value such as `-urgent` stays a value
    instead of being read as an option.
    """
    if not argv or argv[0].startswith("-"):
        return list(argv)

    joined = [argv[0]]
    i = 1
    while i < len(argv):
        token = argv[i]
        following = argv[i + 1] if i + 1 < len(argv) else None
        if (
            token.startswith("--")
            and "=" not in token
            and following is not None
            and not following.startswith("--")
        ):
            joined.append(f"{token}={following}")
            i += 2
        else:
            joined.append(token)
            i += 1
    return joined


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issue-tracker",
        description="Issue tracker backed by a Google spreadsheet",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--version", action="version", version=f"sheets-issue-tracker {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command")

    create = subparsers.add_parser(
        "create", allow_abbrev=False, help="Create a new OPEN issue"
    )
    _optional_value(create, "--description", dest="description", help_text="Issue description")
    _optional_value(
        create, "--parentId", "--parent-id", dest="parent_id", help_text="Optional parent issue ID"
    )

    update = subparsers.add_parser(
        "update", allow_abbrev=False, help="Change the status of an issue"
    )
    _optional_value(update, "--id", dest="id", help_text="ID of the issue to update")
    _optional_value(update, "--status", dest="status", help_text=f"New status ({_STATUS_METAVAR})")

    list_issues = subparsers.add_parser(
        "list", allow_abbrev=False, help="List issues with a given status"
    )
    _optional_value(list_issues, "--status", dest="status", help_text=f"Status ({_STATUS_METAVAR})")

    subparsers.add_parser(
        "init", allow_abbrev=False, help="Write the table header if the sheet is empty"
    )

    return parser


def _missing_flags(args: argparse.Namespace) -> list[str]:
    missing: list[str] = []
    for attr, flag in _REQUIRED_FLAGS.get(args.command, []):
        value = getattr(args, attr, None)
        if value is None or not value.strip():
            missing.append(flag)
    return missing


def format_issue(issue: Issue) -> str:
    created = issue.created_at.isoformat() if issue.created_at else ""
    updated = issue.updated_at.isoformat() if issue.updated_at else ""
    return (
        f"ID={issue.id} | Description={issue.description} | ParentID={issue.parent_id or ''} | "
        f"Status={issue.status.value} | CreatedAt={created} | UpdatedAt={updated}"
    )


def open_store(settings: TrackerSettings) -> TableStore:
    """Create the configured table store and make sure it has a header."""

    store = create_table_store(settings)
    store.ensure_header()
    return store


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    raw_argv = sys.argv[1:] if argv is None else argv
    args, ignored = parser.parse_known_args(join_flag_values(raw_argv))

    if args.command is None:
        parser.print_help(file=sys.stderr)
        return 2

    missing = _missing_flags(args)
    if missing:
        print(f"Missing required {' and '.join(missing)} parameter", file=sys.stderr)
        return 2

    try:
        settings = TrackerSettings()
    except pydantic.ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    if ignored:
        logger.info("Ignoring unknown arguments", extra={"arguments": ignored})

    # Start-up wiring: the header is ensured for every command, before the
    # service checks the command's status or description.
    try:
        store = open_store(settings)
    except CredentialsError as e:
        logger.error("Unable to authenticate with the backing store", extra={"error": str(e)})
        print(str(e), file=sys.stderr)
        return 2

    except StoreIOError as e:
        logger.error("Unable to open the backing store", extra={"error": str(e)})
        print(str(e), file=sys.stderr)
        return 1

    service = IssueService(IssueRepository(store))

    try:
        if args.command == "init":
            print("Issue table is ready")
            return 0

        if args.command == "create":
            issue = service.create_issue(args.description, args.parent_id)
            print(f"Issue {issue.id} created")
            return 0

        if args.command == "update":
            if service.update_status(args.id, args.status):
                status = IssueStatus.parse(args.status)
                print(f"Issue {args.id} updated to status {status.value}")
            else:
                print(f"Issue with ID {args.id} not found")
            return 0

        if args.command == "list":
            issues = service.list_by_status(args.status)
            if not issues:
                print(f"No issues found with status: {IssueStatus.parse(args.status).value}")
            for issue in issues:
                print(format_issue(issue))
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except (ValidationError, RowDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except StoreIOError as e:
        logger.error("Store operation failed", extra={"operation": e.operation})
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
