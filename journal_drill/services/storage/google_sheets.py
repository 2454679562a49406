"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the storage backend because:
1. Instructors can read progress and attempts directly in Sheets
2. No database setup required
3. Easy to export for difficulty analysis

TRADEOFFS:
- Not suitable for high-volume data (fine for one class)
- No transactions; the version check and the write are two API calls
- Limited query capabilities (we filter in Python)

The implementation follows the abstract interface, so we can swap
to PostgreSQL/SQLite later without changing the drill engine.
"""

import json
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from journal_drill.config import GoogleSheetsSettings, get_settings
from journal_drill.models.progress import AttemptRecord, ProgressState
from journal_drill.services.storage.interface import (
    ConnectionError,
    ProgressStorageInterface,
    StorageError,
)


# Column mappings for Progress sheet (one row per student)
PROGRESS_COLUMNS = [
    "email",
    "completed_scenarios_json",
    "current_id",
    "version",
    "updated_at",
]

# Column mappings for Attempts sheet (append-only)
ATTEMPT_COLUMNS = [
    "attempt_id",
    "recorded_at",
    "email",
    "scenario_id",
    "is_correct",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
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
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

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
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int,
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_progress_sheet(self) -> gspread.Worksheet:
        """Get or create the Progress worksheet."""
        return self._get_or_create_sheet(
            self._settings.progress_sheet_name,
            PROGRESS_COLUMNS,
            rows=1000,
        )

    def get_attempts_sheet(self) -> gspread.Worksheet:
        """Get or create the Attempts worksheet."""
        return self._get_or_create_sheet(
            self._settings.attempts_sheet_name,
            ATTEMPT_COLUMNS,
            rows=5000,  # More rows for the attempt log
        )


class GoogleSheetsProgressStorage(ProgressStorageInterface):
    """
    Google Sheets implementation of progress storage.

    Progress is stored one row per student, keyed by email in column A.
    The completion map is JSON-serialized; an empty current_id cell
    means the student finished the catalog.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _state_to_row(self, identity: str, state: ProgressState) -> list:
        """Convert a ProgressState to a spreadsheet row."""
        completed = {
            str(scenario_id): is_correct
            for scenario_id, is_correct in sorted(state.completed_scenarios.items())
        }
        return [
            identity,
            json.dumps(completed),
            str(state.current_scenario_id) if state.current_scenario_id is not None else "",
            str(state.version),
            datetime.now(timezone.utc).isoformat(),
        ]

    def _row_to_state(self, row: list) -> ProgressState:
        """Convert a spreadsheet row to a ProgressState."""
        # Handle missing columns gracefully
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        completed_json = safe_get(1)
        completed = json.loads(completed_json) if completed_json else {}
        current_id = safe_get(2)

        return ProgressState(
            current_scenario_id=int(current_id) if current_id else None,
            completed_scenarios=completed,
            version=int(safe_get(3, "0")),
        )

    def _row_to_attempt(self, row: list) -> AttemptRecord:
        """Convert a spreadsheet row to an AttemptRecord."""
        return AttemptRecord(
            attempt_id=UUID(row[0]),
            recorded_at=datetime.fromisoformat(row[1]),
            identity=row[2],
            scenario_id=int(row[3]),
            is_correct=row[4].lower() == "true",
        )

    def _find_progress_row(
        self,
        sheet: gspread.Worksheet,
        identity: str,
    ) -> tuple[Optional[int], Optional[list]]:
        """Return (1-based sheet row number, row values) for a student."""
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is header
            if row and row[0] == identity:
                return idx, row
        return None, None

    async def load_progress(self, identity: str) -> Optional[ProgressState]:
        """Load a student's progress row."""
        try:
            sheet = self._client.get_progress_sheet()
            _, row = self._find_progress_row(sheet, identity)
            if row is None:
                return None
            return self._row_to_state(row)
        except Exception as e:
            raise StorageError(f"Failed to load progress: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def save_progress(self, identity: str, state: ProgressState) -> bool:
        """Upsert a student's progress row, ignoring stale versions."""
        try:
            sheet = self._client.get_progress_sheet()
            row_number, existing = self._find_progress_row(sheet, identity)
            new_row = self._state_to_row(identity, state)

            if row_number is None:
                sheet.append_row(new_row, value_input_option="RAW")
                return True

            stored = self._row_to_state(existing)
            if state.version <= stored.version:
                return False

            sheet.update(
                values=[new_row],
                range_name=f"A{row_number}:E{row_number}",
                value_input_option="RAW",
            )
            return True
        except Exception as e:
            raise StorageError(f"Failed to save progress: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def record_attempt(
        self,
        identity: str,
        scenario_id: int,
        is_correct: bool,
    ) -> bool:
        """Append one attempt row."""
        record = AttemptRecord(
            identity=identity,
            scenario_id=scenario_id,
            is_correct=is_correct,
        )
        try:
            sheet = self._client.get_attempts_sheet()
            sheet.append_row(
                [
                    str(record.attempt_id),
                    record.recorded_at.isoformat(),
                    record.identity,
                    str(record.scenario_id),
                    str(record.is_correct),
                ],
                value_input_option="RAW",
            )
            return True
        except Exception as e:
            raise StorageError(f"Failed to record attempt: {e}")

    async def list_attempts(
        self,
        identity: Optional[str] = None,
    ) -> list[AttemptRecord]:
        """Read the attempt log, oldest first."""
        try:
            sheet = self._client.get_attempts_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header

            attempts = []
            for row in all_rows:
                if not row or not row[0]:  # Skip empty rows
                    continue
                if identity is not None and (len(row) < 3 or row[2] != identity):
                    continue
                try:
                    attempts.append(self._row_to_attempt(row))
                except (ValueError, IndexError):
                    continue  # Skip malformed rows

            attempts.sort(key=lambda a: a.recorded_at)
            return attempts
        except Exception as e:
            raise StorageError(f"Failed to list attempts: {e}")
