"""Tests for SheetsAdapter."""

from datetime import UTC, date, datetime
from unittest.mock import MagicMock, patch

import pytest

from recording_identity.adapters import LedgerSink
from recording_identity.adapters.sheets_adapter import SheetsAdapter
from recording_identity.reconciliation import LEDGER_COLUMNS, LedgerRow


@pytest.fixture
def mock_gspread():
    """Mock gspread module."""
    with patch("recording_identity.adapters.sheets_adapter.gspread") as mock:
        yield mock


@pytest.fixture
def mock_credentials():
    """Mock google.oauth2.service_account.Credentials."""
    with patch("recording_identity.adapters.sheets_adapter.Credentials") as mock:
        yield mock


def _row(uuid: str, source_tag: str = "cloud-api") -> LedgerRow:
    return LedgerRow(
        uuid=uuid,
        meeting_id="8675309",
        standardized_name=f"Coaching_A_Jenny_Aditi_Wk05_2024-03-05_M:8675309U:{uuid}",
        coach="Jenny Duan",
        student="Aditi Bhaskar",
        name_confidence=95,
        week_number=5,
        week_confidence=105,
        week_method="meeting_metadata",
        participants=("Jenny", "Aditi"),
        session_date=date(2024, 3, 5),
        duration_minutes=59,
        source_tag=source_tag,
        processed_at=datetime(2024, 3, 6, tzinfo=UTC),
    )


def _client_with(mock_gspread, spreadsheet):
    client = MagicMock()
    client.open_by_key.return_value = spreadsheet
    mock_gspread.authorize.return_value = client
    return client


class TestSheetsAdapterInit:
    """Tests for SheetsAdapter initialization."""

    def test_uses_provided_credentials(self, mock_gspread, mock_credentials):
        """Should use credentials path passed to constructor."""
        adapter = SheetsAdapter(credentials_path="/path/to/creds.json")
        adapter._get_client()

        call_args = mock_credentials.from_service_account_file.call_args
        assert call_args[0][0] == "/path/to/creds.json"

    def test_falls_back_to_env_var(self, mock_gspread, mock_credentials, monkeypatch):
        """Should fall back to GOOGLE_CREDENTIALS_PATH env var."""
        monkeypatch.setenv("GOOGLE_CREDENTIALS_PATH", "/env/creds.json")
        adapter = SheetsAdapter()
        adapter._get_client()

        call_args = mock_credentials.from_service_account_file.call_args
        assert call_args[0][0] == "/env/creds.json"

    def test_satisfies_ledger_sink(self):
        """SheetsAdapter is the default LedgerSink."""
        assert isinstance(SheetsAdapter(credentials_path="/x.json"), LedgerSink)

    def test_missing_credentials_raises_value_error(self, mock_gspread, monkeypatch):
        """Should raise ValueError when no credentials available."""
        monkeypatch.delenv("GOOGLE_CREDENTIALS_PATH", raising=False)
        adapter = SheetsAdapter()

        with pytest.raises(ValueError, match="No credentials"):
            adapter._get_client()


class TestWriteRows:
    """Tests for write_rows method."""

    @pytest.mark.asyncio
    async def test_dry_run_returns_success_without_api_call(
        self, mock_gspread, mock_credentials
    ):
        """Dry run should return success without calling API."""
        adapter = SheetsAdapter(credentials_path="/test/creds.json")

        result = await adapter.write_rows(
            "sheet123", [_row("a"), _row("b")], dry_run=True
        )

        assert result.success is True
        assert result.dry_run is True
        assert result.item_count == 2
        assert result.external_id == "sheet123"
        mock_gspread.authorize.assert_not_called()

    @pytest.mark.asyncio
    async def test_appends_after_existing_rows(self, mock_gspread, mock_credentials):
        """Rows go below the header and existing data."""
        worksheet = MagicMock()
        worksheet.get_all_values.return_value = [LEDGER_COLUMNS, ["old"]]
        spreadsheet = MagicMock()
        spreadsheet.worksheet.return_value = worksheet
        _client_with(mock_gspread, spreadsheet)

        adapter = SheetsAdapter(credentials_path="/test/creds.json")
        result = await adapter.write_rows("sheet123", [_row("abc==")])

        assert result.success is True
        assert result.item_count == 1
        assert result.url == "https://docs.google.com/spreadsheets/d/sheet123"
        spreadsheet.worksheet.assert_called_once_with("Zoom API - Standardized")
        range_notation, values = worksheet.update.call_args[0]
        assert range_notation == "A3:N3"
        assert values[0][0] == "abc=="
        assert values[0][6] == 5

    @pytest.mark.asyncio
    async def test_rows_grouped_by_source_tab(self, mock_gspread, mock_credentials):
        worksheet = MagicMock()
        worksheet.get_all_values.return_value = [LEDGER_COLUMNS]
        spreadsheet = MagicMock()
        spreadsheet.worksheet.return_value = worksheet
        _client_with(mock_gspread, spreadsheet)

        adapter = SheetsAdapter(credentials_path="/test/creds.json")
        await adapter.write_rows(
            "sheet123", [_row("a"), _row("b", "file-store"), _row("c")]
        )

        tabs = [call.args[0] for call in spreadsheet.worksheet.call_args_list]
        assert tabs == ["Zoom API - Standardized", "Drive Import - Standardized"]

    @pytest.mark.asyncio
    async def test_creates_worksheet_if_not_found(self, mock_gspread, mock_credentials):
        """Should create the source tab with headers if missing."""
        import gspread

        new_worksheet = MagicMock()
        new_worksheet.get_all_values.return_value = [LEDGER_COLUMNS]
        spreadsheet = MagicMock()
        spreadsheet.worksheet.side_effect = gspread.WorksheetNotFound("Webhook")
        spreadsheet.add_worksheet.return_value = new_worksheet
        _client_with(mock_gspread, spreadsheet)
        mock_gspread.WorksheetNotFound = gspread.WorksheetNotFound

        adapter = SheetsAdapter(credentials_path="/test/creds.json")
        result = await adapter.write_rows("sheet123", [_row("a", "webhook")])

        assert result.success is True
        spreadsheet.add_worksheet.assert_called_once()
        assert spreadsheet.add_worksheet.call_args.kwargs["title"] == (
            "Webhook - Standardized"
        )

    @pytest.mark.asyncio
    async def test_api_error_returns_failure(self, mock_gspread, mock_credentials):
        """Errors are reported in the WriteResult, not raised."""
        client = MagicMock()
        client.open_by_key.side_effect = Exception("quota exceeded")
        mock_gspread.authorize.return_value = client

        adapter = SheetsAdapter(credentials_path="/test/creds.json")
        result = await adapter.write_rows("sheet123", [_row("a")])

        assert result.success is False
        assert result.error_message == "quota exceeded"
        assert result.item_count == 0

    @pytest.mark.asyncio
    async def test_failure_reports_rows_already_written(
        self, mock_gspread, mock_credentials
    ):
        """A failure on the second tab keeps the first tab's rows counted."""
        zoom_tab = MagicMock()
        zoom_tab.get_all_values.return_value = [LEDGER_COLUMNS]
        drive_tab = MagicMock()
        drive_tab.get_all_values.return_value = [LEDGER_COLUMNS]
        drive_tab.update.side_effect = Exception("rate limited")
        spreadsheet = MagicMock()
        spreadsheet.worksheet.side_effect = [zoom_tab, drive_tab]
        _client_with(mock_gspread, spreadsheet)

        adapter = SheetsAdapter(credentials_path="/test/creds.json")
        result = await adapter.write_rows(
            "sheet123", [_row("a"), _row("b"), _row("c", "file-store")]
        )

        assert result.success is False
        assert result.item_count == 2
        assert result.tabs_written == ["Zoom API - Standardized"]
        assert result.error_message == "rate limited"


class TestHealthCheck:
    """Tests for health_check method."""

    @pytest.mark.asyncio
    async def test_health_check_success(self, mock_gspread, mock_credentials):
        adapter = SheetsAdapter(credentials_path="/test/creds.json")

        assert await adapter.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_failure(self, mock_gspread, mock_credentials):
        mock_credentials.from_service_account_file.side_effect = Exception(
            "Invalid credentials"
        )
        adapter = SheetsAdapter(credentials_path="/test/creds.json")

        assert await adapter.health_check() is False
