"""Reconciliation reports and ledger rows."""

from recording_identity.reconciliation.ledger import build_ledger_row
from recording_identity.reconciliation.report_builder import (
    ReconciliationReportBuilder,
    dedupe_by_key,
)
from recording_identity.reconciliation.schemas import (
    LEDGER_COLUMNS,
    Assessment,
    LedgerRow,
    ReconciliationEntry,
    ReconciliationReport,
    assess,
)

__all__ = [
    "LEDGER_COLUMNS",
    "Assessment",
    "LedgerRow",
    "ReconciliationEntry",
    "ReconciliationReport",
    "ReconciliationReportBuilder",
    "assess",
    "build_ledger_row",
    "dedupe_by_key",
]
