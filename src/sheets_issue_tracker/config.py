"""Configuration for the issue tracker CLI.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The Google credentials path reuses the conventional
`GOOGLE_APPLICATION_CREDENTIALS` variable; everything else is prefixed with
`ISSUE_TRACKER_`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sheets_issue_tracker.storage.google_sheets import DEFAULT_BASE_URL


class TrackerSettings(BaseSettings):
    """Settings for the issue tracker.

    Environment variables:
    - ISSUE_TRACKER_BACKEND           (optional, `sheets` or `csv`)
    - ISSUE_TRACKER_SPREADSHEET_ID    (required for the `sheets` backend)
    - ISSUE_TRACKER_SHEET_NAME        (optional, defaults to the first sheet)
    - GOOGLE_APPLICATION_CREDENTIALS  (optional)
    - ISSUE_TRACKER_CSV_PATH          (optional)
    - LOG_LEVEL                       (optional)

    Notes:
        Tests can point at a specific env file with
        `TrackerSettings(_env_file=path_to_env)`.
    """

    backend: Literal["sheets", "csv"] = Field(
        default="sheets",
        validation_alias="ISSUE_TRACKER_BACKEND",
        description="Storage backend for the issue table",
    )

    spreadsheet_id: str = Field(
        default="",
        validation_alias="ISSUE_TRACKER_SPREADSHEET_ID",
        description="Google spreadsheet holding the issue table",
    )
    sheet_name: str | None = Field(
        default=None,
        validation_alias="ISSUE_TRACKER_SHEET_NAME",
        description="Sheet (tab) name; the first sheet is used when unset",
    )
    credentials_file: Path = Field(
        default=Path("credentials.json"),
        validation_alias="GOOGLE_APPLICATION_CREDENTIALS",
        description="Service-account key file used to authenticate with Google",
    )
    sheets_base_url: str = Field(
        default=DEFAULT_BASE_URL,
        validation_alias="ISSUE_TRACKER_SHEETS_BASE_URL",
        description="Google Sheets API base URL",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        validation_alias="ISSUE_TRACKER_REQUEST_TIMEOUT",
        description="Per-request timeout in seconds",
    )

    csv_path: Path = Field(
        default=Path("issues.csv"),
        validation_alias="ISSUE_TRACKER_CSV_PATH",
        description="CSV file used by the `csv` backend",
    )

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @model_validator(mode="after")
    def _require_spreadsheet(self) -> TrackerSettings:
        if self.backend == "sheets" and not self.spreadsheet_id.strip():
            raise ValueError("ISSUE_TRACKER_SPREADSHEET_ID is required for the sheets backend")
        return self
