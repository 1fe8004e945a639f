"""Sheets Issue Tracker.

A command-line issue tracker that keeps its issues in a Google spreadsheet:
- configuration loaded from `.env`
- structured logging
- create / update / list issues stored as table rows
"""

__version__ = "0.1.0"

from sheets_issue_tracker.config import TrackerSettings

__all__ = ["__version__", "TrackerSettings"]
