"""
Google Sheets Integration
Reads tabs and appends rows, always addressing tabs by GID.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional

import gspread
import requests
from google.auth.exceptions import TransportError
from pydantic import ValidationError

import config
from sales_errors import (
    RangeResolutionFailed,
    SalesError,
    SheetProtected,
    TransientWriteFailure,
    Unauthenticated,
)
from sheets.google_auth import mint_credentials
from sheets.payloads import AppendResponse, ValueRange
from sheets.sheet_locator import ResolvedTab, resolve_tab

_PROTECTION_MARKERS = ("protected cell", "protected range", "protected object", "protected sheet")


@dataclass
class AppendOutcome:
    """Result of one append call: a row count on success, or exactly one error."""
    target: str
    ok: bool
    updated_rows: int = 0
    updated_range: str = ""
    error: Optional[SalesError] = None

    @classmethod
    def success(cls, target: str, response: AppendResponse) -> "AppendOutcome":
        return cls(
            target=target,
            ok=True,
            updated_rows=response.updates.updatedRows,
            updated_range=response.updates.updatedRange,
        )

    @classmethod
    def failure(cls, target: str, error: SalesError) -> "AppendOutcome":
        return cls(target=target, ok=False, error=error)

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "ok": self.ok,
            "updated_rows": self.updated_rows,
            "updated_range": self.updated_range,
            "error": self.error.to_dict() if self.error else None,
        }


def _api_error_payload(exc: gspread.exceptions.APIError) -> dict:
    response = getattr(exc, "response", None)
    if response is None:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {}
    error = body.get("error") if isinstance(body, dict) else None
    return error if isinstance(error, dict) else {}


def classify_error(exc: Exception) -> SalesError:
    """
    Map a failure from gspread / requests / google-auth onto the error taxonomy.

    Already-classified errors pass through unchanged.
    """
    if isinstance(exc, SalesError):
        return exc

    if isinstance(exc, gspread.exceptions.APIError):
        payload = _api_error_payload(exc)
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None) or payload.get("code") or 0
        message = payload.get("message") or str(exc)
        lowered = message.lower()

        if status == 403 and any(marker in lowered for marker in _PROTECTION_MARKERS):
            return SheetProtected(detail=message)
        if status in (401, 403):
            return Unauthenticated(f"Google Sheets refused the credentials ({status})", detail=message)
        if status in (400, 404):
            return RangeResolutionFailed(f"Google Sheets could not resolve the target ({status})", detail=message)
        return TransientWriteFailure(f"Google Sheets API error ({status})", detail=message)

    if isinstance(exc, (requests.exceptions.RequestException, TransportError)):
        return TransientWriteFailure(f"Network error talking to Google Sheets: {exc}")

    if isinstance(exc, ValidationError):
        return TransientWriteFailure("Malformed response from Google Sheets", detail=str(exc))

    raise TypeError(f"Unclassifiable error: {exc!r}") from exc


_REMOTE_ERRORS = (
    SalesError,
    gspread.exceptions.APIError,
    requests.exceptions.RequestException,
    TransportError,
    ValidationError,
)


class _StaticClient:
    """Stands in for a gspread client when a spreadsheet object is injected."""

    def __init__(self, spreadsheet):
        self._spreadsheet = spreadsheet

    def open_by_key(self, key):
        return self._spreadsheet


def _authorize(credentials):
    client = gspread.authorize(credentials)
    client.set_timeout(config.SHEETS_HTTP_TIMEOUT_SECONDS)
    return client


class SheetsGateway:
    """
    Thin wrapper around the Sheets API for GID-addressed reads and appends.

    A fresh bearer token is minted for every call. For tests, inject a fake
    spreadsheet via ``from_spreadsheet(spreadsheet)`` to skip auth and network.
    """

    def __init__(
        self,
        credentials_provider: Optional[Callable[[], object]] = None,
        client_factory: Optional[Callable[[object], object]] = None,
    ):
        self._credentials_provider = credentials_provider or mint_credentials
        self._client_factory = client_factory or _authorize

    @classmethod
    def from_spreadsheet(cls, spreadsheet) -> "SheetsGateway":
        """Helper for unit tests to inject a fake spreadsheet."""
        client = _StaticClient(spreadsheet)
        return cls(credentials_provider=lambda: None, client_factory=lambda _creds: client)

    # ─────────────────────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────────────────────

    def _open(self, spreadsheet_id: str):
        # Token failures raise Unauthenticated before any Sheets call
        credentials = self._credentials_provider()
        client = self._client_factory(credentials)
        try:
            return client.open_by_key(spreadsheet_id)
        except gspread.exceptions.SpreadsheetNotFound:
            raise RangeResolutionFailed(f"Spreadsheet {spreadsheet_id} not found or not shared with the service account")
        except _REMOTE_ERRORS as e:
            raise classify_error(e)

    def _resolve(self, spreadsheet, gid) -> ResolvedTab:
        try:
            return resolve_tab(spreadsheet, gid)
        except _REMOTE_ERRORS as e:
            raise classify_error(e)

    # ─────────────────────────────────────────────────────────────
    # Public methods
    # ─────────────────────────────────────────────────────────────

    def resolve_tab(self, spreadsheet_id: str, gid) -> ResolvedTab:
        """Look up the current title of a tab from its GID."""
        spreadsheet = self._open(spreadsheet_id)
        return self._resolve(spreadsheet, gid)

    def read_tab_as_table(self, spreadsheet_id: str, gid) -> List[List[str]]:
        """
        Read every row of the tab identified by ``gid``.

        Empty cells come back as ''. Header and blank rows are left in place
        for the caller to handle.

        Raises:
            SalesError subclass describing the failure.
        """
        spreadsheet = self._open(spreadsheet_id)
        tab = self._resolve(spreadsheet, gid)
        try:
            raw = spreadsheet.values_get(tab.a1_range)
            return ValueRange.model_validate(raw).as_table()
        except _REMOTE_ERRORS as e:
            raise classify_error(e)

    def append_rows(self, spreadsheet_id: str, gid, rows: List[List[str]], target: str = "") -> AppendOutcome:
        """
        Append rows after the last populated row of the tab identified by ``gid``.

        Never overwrites existing cells. Failures are returned in the outcome,
        not raised.
        """
        target = target or str(gid)
        try:
            spreadsheet = self._open(spreadsheet_id)
            tab = self._resolve(spreadsheet, gid)
            raw = spreadsheet.values_append(
                tab.a1_range,
                params={
                    "valueInputOption": "USER_ENTERED",
                    "insertDataOption": "INSERT_ROWS",
                },
                body={"values": rows},
            )
            return AppendOutcome.success(target, AppendResponse.model_validate(raw))
        except _REMOTE_ERRORS as e:
            return AppendOutcome.failure(target, classify_error(e))
