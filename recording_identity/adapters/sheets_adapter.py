"""Adapter for writing ledger rows to Google Sheets.

Uses gspread library with service account authentication to batch
append ledger rows to the tab of each recording's source.
"""

import asyncio
import os
import time
from collections import defaultdict

import gspread
import structlog
from google.oauth2.service_account import Credentials

from recording_identity.adapters.base import WriteResult
from recording_identity.reconciliation.schemas import LEDGER_COLUMNS, LedgerRow

logger = structlog.get_logger()

SOURCE_TABS = {
    "cloud-api": "Zoom API - Standardized",
    "webhook": "Webhook - Standardized",
    "file-store": "Drive Import - Standardized",
}


class SheetsAdapter:
    """Adapter for appending ledger rows to Google Sheets.

    One tab per source; rows are grouped by source tag and each group
    is written with a single update call.
    """

    SCOPES = [
        "https://www.googleapis.com/auth/spreadsheets",
        "https://www.googleapis.com/auth/drive.file",
    ]

    def __init__(self, credentials_path: str | None = None):
        """Initialize with service account credentials.

        Args:
            credentials_path: Path to service account JSON.
                             Falls back to GOOGLE_CREDENTIALS_PATH env var.
        """
        self._credentials_path = credentials_path or os.environ.get(
            "GOOGLE_CREDENTIALS_PATH"
        )
        self._client: gspread.Client | None = None

    def _get_client(self) -> gspread.Client:
        """Get or create authenticated gspread client.

        Raises:
            ValueError: If no credentials path configured
        """
        if self._client is None:
            if not self._credentials_path:
                raise ValueError(
                    "No credentials. Set GOOGLE_CREDENTIALS_PATH env var "
                    "or pass credentials_path to constructor."
                )
            creds = Credentials.from_service_account_file(
                self._credentials_path,
                scopes=self.SCOPES,
            )
            self._client = gspread.authorize(creds)
        return self._client

    @staticmethod
    def tab_for(source_tag: str) -> str:
        """Worksheet name for a source tag."""
        return SOURCE_TABS.get(source_tag, f"{source_tag} - Standardized")

    async def write_rows(
        self,
        spreadsheet_id: str,
        rows: list[LedgerRow],
        *,
        dry_run: bool = False,
    ) -> WriteResult:
        """Append ledger rows to their source tabs.

        Args:
            spreadsheet_id: Google Sheets ID (from URL)
            rows: Ledger rows to append
            dry_run: If True, log and return without writing

        Returns:
            WriteResult with operation outcome. On failure, item_count and
            tabs_written cover the tabs already appended before the error.
        """
        if dry_run:
            logger.info(
                "dry_run: would write ledger rows",
                spreadsheet_id=spreadsheet_id,
                item_count=len(rows),
            )
            return WriteResult(
                success=True,
                dry_run=True,
                item_count=len(rows),
                external_id=spreadsheet_id,
            )

        return await asyncio.to_thread(self._write_sync, spreadsheet_id, rows)

    def _worksheet(self, spreadsheet, title: str):
        try:
            return spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            worksheet = spreadsheet.add_worksheet(
                title=title, rows=100, cols=len(LEDGER_COLUMNS)
            )
            worksheet.update("A1", [LEDGER_COLUMNS])
            return worksheet

    def _write_sync(self, spreadsheet_id: str, rows: list[LedgerRow]) -> WriteResult:
        """Synchronous write implementation."""
        start_time = time.monotonic()
        written = 0
        tabs_written: list[str] = []

        try:
            client = self._get_client()
            spreadsheet = client.open_by_key(spreadsheet_id)

            grouped: dict[str, list[LedgerRow]] = defaultdict(list)
            for row in rows:
                grouped[self.tab_for(row.source_tag)].append(row)

            for tab, tab_rows in grouped.items():
                worksheet = self._worksheet(spreadsheet, tab)
                existing_values = worksheet.get_all_values()
                if not existing_values:
                    worksheet.update("A1", [LEDGER_COLUMNS])
                    start_row = 2
                else:
                    start_row = len(existing_values) + 1

                values = [row.to_sheet_row() for row in tab_rows]
                last_col = chr(ord("A") + len(LEDGER_COLUMNS) - 1)
                range_notation = f"A{start_row}:{last_col}{start_row + len(values) - 1}"
                worksheet.update(
                    range_notation, values, value_input_option="USER_ENTERED"
                )
                written += len(values)
                tabs_written.append(tab)

            duration_ms = int((time.monotonic() - start_time) * 1000)

            logger.info(
                "wrote ledger rows to sheet",
                spreadsheet_id=spreadsheet_id,
                tabs=tabs_written,
                item_count=len(rows),
                duration_ms=duration_ms,
            )

            return WriteResult(
                success=True,
                dry_run=False,
                item_count=len(rows),
                external_id=spreadsheet_id,
                url=f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}",
                tabs_written=tabs_written,
                duration_ms=duration_ms,
            )

        except Exception as e:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            logger.error(
                "failed to write ledger rows",
                spreadsheet_id=spreadsheet_id,
                tabs_written=tabs_written,
                rows_written=written,
                error=str(e),
                duration_ms=duration_ms,
            )
            return WriteResult(
                success=False,
                dry_run=False,
                item_count=written,
                external_id=spreadsheet_id,
                tabs_written=tabs_written,
                error_message=str(e),
                duration_ms=duration_ms,
            )

    async def health_check(self) -> bool:
        """Check if adapter is properly configured.

        Returns:
            True if credentials can authenticate, False otherwise
        """
        try:
            self._get_client()
            return True
        except Exception:
            return False
