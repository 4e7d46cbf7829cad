"""Ledger row assembly.

Everything the ledger needs is already computed by the engine; this
module only lays the values out.
"""

from datetime import UTC, datetime

from recording_identity.identity.schemas import NameResolution
from recording_identity.models import Recording
from recording_identity.reconciliation.schemas import LedgerRow
from recording_identity.weeks.schemas import WeekInferenceResult


def build_ledger_row(
    recording: Recording,
    week: WeekInferenceResult,
    names: NameResolution,
    standardized_name: str,
    processed_at: datetime | None = None,
) -> LedgerRow:
    """Assemble the ledger row for one processed recording.

    Args:
        recording: Source recording
        week: Its week inference
        names: Its resolved coach/student
        standardized_name: Output of build_standardized_name
        processed_at: Processing time (defaults to now, UTC)

    Returns:
        LedgerRow ready for a LedgerSink
    """
    return LedgerRow(
        uuid=recording.key,
        meeting_id=recording.secondary_id,
        standardized_name=standardized_name,
        coach=names.coach,
        student=names.student,
        name_confidence=names.confidence,
        week_number=week.week_number,
        week_confidence=week.confidence,
        week_method=week.method.value,
        participants=recording.participants,
        session_date=recording.session_date,
        duration_minutes=recording.duration_seconds // 60,
        source_tag=recording.source_tag.value,
        processed_at=processed_at or datetime.now(UTC),
    )
