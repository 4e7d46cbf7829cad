"""Adapters for Google Sheets (roster, ledger) and Google Drive (file store)."""

from recording_identity.adapters.base import LedgerSink, WriteResult
from recording_identity.adapters.drive_adapter import DriveAdapter
from recording_identity.adapters.roster_adapter import RosterAdapter
from recording_identity.adapters.sheets_adapter import SheetsAdapter

__all__ = [
    "DriveAdapter",
    "LedgerSink",
    "RosterAdapter",
    "SheetsAdapter",
    "WriteResult",
]
