"""
Google Sheets Key-Value Store

Stores each ledger collection as one row of a worksheet:

    key            | value
    transactions   | [{"id": ..., ...}, ...]
    closedMonths   | ["01/2025", "02/2025"]

Non-technical users can open the spreadsheet and see their data, and the
backup is Google's. A single cell holds at most 50,000 characters, which
bounds how large one collection can grow on this backend.

Only the connection is retried. Reads and writes are single attempts:
a failed write surfaces as StorageError and the ledger reports it.
"""

from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from household_ledger.config import GoogleSheetsSettings, get_settings
from household_ledger.services.storage.interface import (
    ConnectionError,
    KeyValueStoreInterface,
    StorageError,
)


STORE_COLUMNS = ["key", "value"]
SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Google Sheets hard limit per cell
MAX_CELL_CHARACTERS = 50000


class GoogleSheetsClient:
    """
    Opens the ledger spreadsheet with a service account and hands out
    the key/value worksheet, creating it on first use.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._settings = settings or get_settings().google_sheets
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._store_sheet: Optional[gspread.Worksheet] = None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """Authorize once; later calls reuse the client."""
        if self._client is not None:
            return self._client

        path = self._settings.credentials_path
        try:
            credentials = Credentials.from_service_account_file(path, scopes=SCOPES)
        except FileNotFoundError as e:
            raise ConnectionError(f"Service account key not found at {path}") from e
        except ValueError as e:
            raise ConnectionError(f"Service account key at {path} is malformed: {e}") from e

        try:
            self._client = gspread.authorize(credentials)
        except Exception as e:
            raise ConnectionError(f"Could not authorize the ledger service account: {e}") from e
        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            try:
                self._spreadsheet = self.connect().open_by_key(self._settings.spreadsheet_id)
            except gspread.SpreadsheetNotFound as e:
                raise ConnectionError(
                    f"Ledger spreadsheet {self._settings.spreadsheet_id} not found "
                    "or not shared with the service account"
                ) from e
        return self._spreadsheet

    def get_store_sheet(self) -> gspread.Worksheet:
        """The key/value worksheet, created with its header row when missing."""
        if self._store_sheet is not None:
            return self._store_sheet

        spreadsheet = self.get_spreadsheet()
        title = self._settings.store_sheet_name
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(title=title, rows=20, cols=len(STORE_COLUMNS))

        if sheet.row_values(1) != STORE_COLUMNS:
            sheet.update_cell(1, 1, STORE_COLUMNS[0])
            sheet.update_cell(1, 2, STORE_COLUMNS[1])

        self._store_sheet = sheet
        return sheet


class GoogleSheetsKeyValueStore(KeyValueStoreInterface):
    """
    Google Sheets implementation of the ledger's key-value store.

    Keys live in column A, serialized snapshots in column B.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, sheet: gspread.Worksheet, key: str) -> Optional[int]:
        """1-based row index holding `key`, skipping the header."""
        keys = sheet.col_values(1)
        for idx, value in enumerate(keys[1:], start=2):
            if value == key:
                return idx
        return None

    async def get(self, key: str) -> Optional[str]:
        """Read the snapshot stored under a key."""
        try:
            sheet = self._client.get_store_sheet()
            row = self._find_row(sheet, key)
            return None if row is None else sheet.cell(row, 2).value
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e

    async def set(self, key: str, value: str) -> bool:
        """Replace the snapshot under a key, appending a row for new keys."""
        if len(value) > MAX_CELL_CHARACTERS:
            raise StorageError(
                f"Collection '{key}' is {len(value)} characters, "
                f"above the {MAX_CELL_CHARACTERS} per-cell limit"
            )
        try:
            sheet = self._client.get_store_sheet()
            row = self._find_row(sheet, key)
            if row is None:
                sheet.append_row([key, value], value_input_option="RAW")
            else:
                sheet.update_cell(row, 2, value)
            return True
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write '{key}': {e}") from e
