"""Unit tests for the Google Sheets table store (mocked HTTP session)."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from sheets_issue_tracker.errors import CredentialsError, StoreIOError
from sheets_issue_tracker.models import ISSUE_HEADER
from sheets_issue_tracker.storage.google_sheets import (
    DEFAULT_BASE_URL,
    GoogleSheetsTableStore,
    column_letter,
    quote_sheet_name,
)

SPREADSHEET = "sheet-123"


def _response(payload: dict[str, Any], status_code: int = 200) -> Mock:
    resp = Mock(spec=requests.Response)
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Client Error")
    return resp


def _store(session: Mock, sheet_name: str | None = "Sheet1") -> GoogleSheetsTableStore:
    return GoogleSheetsTableStore(
        spreadsheet_id=SPREADSHEET,
        session=session,
        header=ISSUE_HEADER,
        sheet_name=sheet_name,
    )


@pytest.fixture
def session() -> Mock:
    return Mock(spec=requests.Session)


def test_column_letter() -> None:
    assert column_letter(1) == "A"
    assert column_letter(6) == "F"
    assert column_letter(26) == "Z"
    assert column_letter(27) == "AA"


def test_quote_sheet_name() -> None:
    assert quote_sheet_name("Sheet1") == "Sheet1"
    assert quote_sheet_name("My Issues") == "'My Issues'"
    assert quote_sheet_name("Bob's") == "'Bob''s'"


def test_ranges_cover_six_columns(session: Mock) -> None:
    store = _store(session)

    assert store.a1_range(1) == "Sheet1!A1:F1"
    assert store.a1_range(7) == "Sheet1!A7:F7"
    assert store.a1_range() == "Sheet1!A:F"


def test_first_sheet_is_used_when_name_not_configured(session: Mock) -> None:
    session.request.return_value = _response(
        {"sheets": [{"properties": {"title": "Issues"}}, {"properties": {"title": "Other"}}]}
    )

    store = _store(session, sheet_name=None)

    assert store.sheet_name == "Issues"
    method, url = session.request.call_args.args
    assert method == "GET"
    assert url == f"{DEFAULT_BASE_URL}/{SPREADSHEET}"


def test_spreadsheet_without_sheets_is_an_error(session: Mock) -> None:
    session.request.return_value = _response({"sheets": []})

    with pytest.raises(StoreIOError, match="no sheets"):
        _store(session, sheet_name=None)


def test_ensure_header_writes_when_empty(session: Mock) -> None:
    session.request.side_effect = [_response({"range": "Sheet1!A1:F1"}), _response({})]
    store = _store(session)

    assert store.ensure_header() is True

    get_call, put_call = session.request.call_args_list
    assert get_call.args[0] == "GET"
    assert get_call.args[1].endswith("/values/Sheet1%21A1%3AF1")
    assert put_call.args[0] == "PUT"
    assert put_call.kwargs["params"] == {"valueInputOption": "RAW"}
    assert put_call.kwargs["json"]["values"] == [list(ISSUE_HEADER)]


def test_ensure_header_is_idempotent(session: Mock) -> None:
    session.request.return_value = _response({"values": [list(ISSUE_HEADER)]})
    store = _store(session)

    assert store.ensure_header() is False
    assert store.ensure_header() is False

    assert [c.args[0] for c in session.request.call_args_list] == ["GET", "GET"]


def test_append_row_posts_to_append_endpoint(session: Mock) -> None:
    session.request.return_value = _response({"updates": {"updatedRows": 1}})
    store = _store(session)

    store.append_row(["AD-1", "Desc", "", "OPEN", "2025-01-01T00:00:00+00:00", ""])

    method, url = session.request.call_args.args
    kwargs = session.request.call_args.kwargs
    assert method == "POST"
    assert url.endswith("/values/Sheet1%21A%3AF:append")
    assert kwargs["params"] == {"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"}
    assert kwargs["json"]["values"] == [
        ["AD-1", "Desc", "", "OPEN", "2025-01-01T00:00:00+00:00", ""]
    ]
    assert kwargs["timeout"] == 30.0


def test_read_all_returns_string_cells(session: Mock) -> None:
    session.request.return_value = _response(
        {"values": [list(ISSUE_HEADER), ["AD-1", "Desc", "", "OPEN", 5]]}
    )

    rows = _store(session).read_all()

    assert rows == [list(ISSUE_HEADER), ["AD-1", "Desc", "", "OPEN", "5"]]


def test_read_all_of_empty_sheet(session: Mock) -> None:
    session.request.return_value = _response({"range": "Sheet1!A1:F1000"})

    assert _store(session).read_all() == []


def test_update_row_targets_single_row_range(session: Mock) -> None:
    session.request.return_value = _response({})

    _store(session).update_row(4, ["AD-1", "Desc", "", "CLOSED", "", "ts"])

    method, url = session.request.call_args.args
    assert method == "PUT"
    assert url.endswith("/values/Sheet1%21A4%3AF4")
    assert session.request.call_args.kwargs["json"]["range"] == "Sheet1!A4:F4"


def test_update_row_rejects_invalid_position(session: Mock) -> None:
    store = _store(session)

    with pytest.raises(StoreIOError, match="invalid row position 0"):
        store.update_row(0, ["x"])

    session.request.assert_not_called()


def test_http_errors_become_store_errors(session: Mock) -> None:
    session.request.return_value = _response({}, status_code=403)

    with pytest.raises(StoreIOError) as exc_info:
        _store(session).read_all()

    assert exc_info.value.operation == "read_all"
    assert isinstance(exc_info.value.__cause__, requests.HTTPError)


def test_transport_errors_become_store_errors(session: Mock) -> None:
    session.request.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(StoreIOError, match="connection refused"):
        _store(session).append_row(["AD-1"])


def test_missing_credentials_file(tmp_path: Path) -> None:
    with pytest.raises(CredentialsError, match="Unable to load service account credentials"):
        GoogleSheetsTableStore.from_service_account_file(
            tmp_path / "missing.json",
            spreadsheet_id=SPREADSHEET,
            header=ISSUE_HEADER,
            sheet_name="Sheet1",
        )
