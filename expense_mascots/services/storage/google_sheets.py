"""
Google Sheets Preference Storage

DESIGN DECISION: Google Sheets is a supported backend because:
1. The household can inspect (and fix) their preferences directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- No unique constraint, so upsert is "find row, else append"
- No transactions; last write wins, which is what the engine expects
- Every lookup reads the whole sheet (fine for a handful of users)

gspread is synchronous, so calls run in a worker thread to keep the
event loop free while the selection UI stays responsive.
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_mascots.config import get_settings
from expense_mascots.models.preferences import PreferenceKind, PreferenceRecord
from expense_mascots.services.storage.interface import (
    MalformedPreferenceError,
    PreferenceStorageInterface,
    TransientStoreError,
    require_user,
)


# Column mappings for the UserPreferences sheet
PREFERENCE_COLUMNS = [
    "user_id",
    "preference_key",
    "preference_value_json",
    "created_at",
    "updated_at",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and caches the spreadsheet handle.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication. Failures are
        not retried here; the storage methods retry the whole operation.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise TransientStoreError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise TransientStoreError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise TransientStoreError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_preferences_sheet(self) -> gspread.Worksheet:
        """Get or create the preferences worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.preferences_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.preferences_sheet_name,
                rows=1000,
                cols=len(PREFERENCE_COLUMNS),
            )
            sheet.append_row(PREFERENCE_COLUMNS)
        return sheet


_transient_retry = retry(
    retry=retry_if_exception_type(TransientStoreError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


class GoogleSheetsPreferenceStorage(PreferenceStorageInterface):
    """
    Google Sheets implementation of preference storage.

    One row per (user_id, preference_key); the value is JSON-serialized.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _record_to_row(self, record: PreferenceRecord) -> list:
        """Convert a PreferenceRecord to a spreadsheet row."""
        return [
            record.user_id,
            record.preference_kind.value,
            json.dumps(record.value),
            record.created_at.isoformat() if record.created_at else "",
            record.updated_at.isoformat(),
        ]

    def _row_to_record(self, row: list) -> PreferenceRecord:
        """Convert a spreadsheet row to a PreferenceRecord."""
        # Handle missing columns gracefully
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        try:
            value = json.loads(safe_get(2) or "{}")
            if not isinstance(value, dict):
                raise ValueError("preference value is not a JSON object")
            return PreferenceRecord(
                user_id=safe_get(0),
                preference_kind=PreferenceKind(safe_get(1)),
                value=value,
                created_at=datetime.fromisoformat(safe_get(3)) if safe_get(3) else None,
                updated_at=datetime.fromisoformat(safe_get(4)),
            )
        except ValueError as e:
            raise MalformedPreferenceError(f"Unreadable preference row: {e}")

    def _find_row(
        self,
        sheet: gspread.Worksheet,
        user_id: str,
        kind: PreferenceKind,
    ) -> tuple[Optional[int], Optional[list]]:
        """Locate a record; returns (1-based sheet row, values)."""
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is header
            if len(row) > 1 and row[0] == user_id and row[1] == kind.value:
                return idx, row
        return None, None

    def _read_sync(self, user_id: str, kind: PreferenceKind) -> Optional[list]:
        try:
            sheet = self._client.get_preferences_sheet()
            _, row = self._find_row(sheet, user_id, kind)
            return row
        except TransientStoreError:
            raise
        except Exception as e:
            raise TransientStoreError(f"Failed to read preference: {e}")

    def _write_sync(self, record: PreferenceRecord) -> PreferenceRecord:
        try:
            sheet = self._client.get_preferences_sheet()
            idx, existing = self._find_row(sheet, record.user_id, record.preference_kind)

            if idx is None:
                record.created_at = record.updated_at
                sheet.append_row(self._record_to_row(record), value_input_option="RAW")
            else:
                created = existing[3] if len(existing) > 3 and existing[3] else ""
                record.created_at = (
                    datetime.fromisoformat(created) if created else record.updated_at
                )
                sheet.update(
                    range_name=f"A{idx}:E{idx}",
                    values=[self._record_to_row(record)],
                )
            return record
        except TransientStoreError:
            raise
        except Exception as e:
            raise TransientStoreError(f"Failed to save preference: {e}")

    def _delete_sync(self, user_id: str, kind: PreferenceKind) -> None:
        try:
            sheet = self._client.get_preferences_sheet()
            idx, _ = self._find_row(sheet, user_id, kind)
            if idx is not None:
                sheet.delete_rows(idx)
        except TransientStoreError:
            raise
        except Exception as e:
            raise TransientStoreError(f"Failed to delete preference: {e}")

    @_transient_retry
    async def read(
        self,
        user_id: str,
        kind: PreferenceKind,
    ) -> Optional[PreferenceRecord]:
        """Read a preference record from Google Sheets."""
        row = await asyncio.to_thread(self._read_sync, require_user(user_id), kind)
        return self._row_to_record(row) if row else None

    @_transient_retry
    async def write(
        self,
        user_id: str,
        kind: PreferenceKind,
        value: dict[str, Any],
    ) -> PreferenceRecord:
        """Upsert a preference record in Google Sheets."""
        record = PreferenceRecord(
            user_id=require_user(user_id),
            preference_kind=kind,
            value=value,
            updated_at=datetime.now(timezone.utc),
        )
        return await asyncio.to_thread(self._write_sync, record)

    @_transient_retry
    async def delete(self, user_id: str, kind: PreferenceKind) -> None:
        """Delete a preference record from Google Sheets."""
        await asyncio.to_thread(self._delete_sync, require_user(user_id), kind)
