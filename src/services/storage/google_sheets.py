"""
Google Sheets Data Source

DESIGN DECISION: The household keeps its records in a spreadsheet, one
worksheet per table:
1. Non-technical members can edit their payments directly
2. No database setup required
3. Built-in history (Google's version history)

TRADEOFFS:
- Linked records are plain cells, so link columns hold comma-separated
  ids ("rec1, rec2") that we split back into lists here
- Empty cells come back as "" and are dropped so model defaults apply
- Limited query capabilities (we read whole worksheets)

Retries live here and only here. The billing pipeline never retries.
"""

from typing import Any, Optional

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import get_settings
from src.config.settings import GoogleSheetsSettings
from src.services.storage.interface import (
    BillingDataSource,
    ConnectionError,
    RawRecord,
    StorageError,
    TableNotFoundError,
)


# Columns holding linked record ids, per logical table
LINK_COLUMNS = {
    "transactions": ("owner",),
    "services": (),
    "change_log": ("service", "members"),
    "members": ("transaction_ids", "subscription change log"),
}

logger = structlog.get_logger(__name__)


def split_link_cell(value: Any) -> list[str]:
    """Turn a link cell ("rec1, rec2", a bare number, or a list) into ids."""
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    if value is None:
        return []
    return [part.strip() for part in str(value).split(",") if part.strip()]


def normalize_row(table: str, row: dict[str, Any]) -> Optional[RawRecord]:
    """
    Clean one worksheet row into a raw record.

    Returns None for blank rows (no id), which spreadsheets are full of.
    """
    record = {
        key.strip(): value
        for key, value in row.items()
        if key and value != ""
    }
    if not record.get("id"):
        return None
    for column in LINK_COLUMNS.get(table, ()):
        if column in record:
            record[column] = split_link_cell(record[column])
    return record


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def sheet_names(self) -> dict[str, str]:
        return self._settings.sheet_names

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials, read-only scope.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets.readonly",
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

    def get_worksheet(self, title: str) -> gspread.Worksheet:
        """Get a worksheet by title. We never create one; the household owns the layout."""
        spreadsheet = self.get_spreadsheet()
        try:
            return spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            raise TableNotFoundError(f"Worksheet not found: {title}")


class GoogleSheetsBillingSource(BillingDataSource):
    """
    Google Sheets implementation of the billing data source.

    Each logical table is one worksheet whose first row holds the column
    names ("id", "Name", "start date", ...).
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @retry(
        retry=retry_if_not_exception_type(TableNotFoundError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def fetch_records(self, table: str) -> list[RawRecord]:
        """Read one worksheet and return its non-blank rows."""
        title = self._client.sheet_names.get(table)
        if title is None:
            raise TableNotFoundError(f"Table not found: {table}")

        try:
            sheet = self._client.get_worksheet(title)
            rows = sheet.get_all_records()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read worksheet {title!r}: {e}")

        records = []
        for row in rows:
            record = normalize_row(table, row)
            if record is not None:
                records.append(record)

        logger.debug(
            "worksheet_read",
            table=table,
            worksheet=title,
            rows=len(rows),
            records=len(records),
        )
        return records
