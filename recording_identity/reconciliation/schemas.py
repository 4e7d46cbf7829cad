"""Reconciliation report schemas.

Defines the per-record report entry, the aggregate report, and the
ledger row written to the external spreadsheet.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from recording_identity.identity.schemas import MatchResult
from recording_identity.weeks.schemas import WeekInferenceStats

EXCELLENT_MATCH_RATE = 95.0
GOOD_MATCH_RATE = 85.0


class Assessment(str, Enum):
    """Overall verdict on a reconciliation run."""

    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_REVIEW = "needs_review"


def assess(match_rate: float) -> Assessment:
    """Verdict for a match rate (percent)."""
    if match_rate >= EXCELLENT_MATCH_RATE:
        return Assessment.EXCELLENT
    if match_rate >= GOOD_MATCH_RATE:
        return Assessment.GOOD
    return Assessment.NEEDS_REVIEW


class ReconciliationEntry(BaseModel):
    """Match outcome for one query record."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Recording.key of the query")
    title: str = ""
    result: MatchResult
    index_name: str | None = Field(
        default=None, description="Index that produced the match"
    )


class ReconciliationReport(BaseModel):
    """Aggregate outcome of reconciling one corpus against others."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    exact_matches: tuple[ReconciliationEntry, ...] = ()
    fuzzy_matches: tuple[ReconciliationEntry, ...] = ()
    possible_matches: tuple[ReconciliationEntry, ...] = ()
    not_found: tuple[ReconciliationEntry, ...] = ()
    match_rate: float = Field(default=0.0, description="(exact + fuzzy) / total, percent")
    assessment: Assessment = Assessment.NEEDS_REVIEW
    method_counts: dict[str, int] = Field(default_factory=dict)
    week_stats: WeekInferenceStats | None = None
    review_queue: tuple[str, ...] = Field(
        default=(), description="Keys needing a human decision, in input order"
    )

    @property
    def counts(self) -> dict[str, int]:
        """Bucket sizes keyed by bucket name."""
        return {
            "exact_matches": len(self.exact_matches),
            "fuzzy_matches": len(self.fuzzy_matches),
            "possible_matches": len(self.possible_matches),
            "not_found": len(self.not_found),
        }


class LedgerRow(BaseModel):
    """One ledger spreadsheet row per processed recording."""

    model_config = ConfigDict(frozen=True)

    uuid: str
    meeting_id: str | None = None
    standardized_name: str
    coach: str
    student: str
    name_confidence: int = Field(ge=0, le=100)
    week_number: int | None = None
    week_confidence: int = Field(ge=0, le=110)
    week_method: str
    participants: tuple[str, ...] = ()
    session_date: date | None = None
    duration_minutes: int = 0
    source_tag: str
    processed_at: datetime

    def to_sheet_row(self) -> list[str | int]:
        """Cell values in LEDGER_COLUMNS order."""
        return [
            self.uuid,
            self.meeting_id or "",
            self.standardized_name,
            self.coach,
            self.student,
            self.name_confidence,
            self.week_number if self.week_number is not None else "",
            self.week_confidence,
            self.week_method,
            ", ".join(self.participants),
            self.session_date.isoformat() if self.session_date else "",
            self.duration_minutes,
            self.source_tag,
            self.processed_at.isoformat(),
        ]


LEDGER_COLUMNS = [
    "UUID",
    "Meeting ID",
    "Standardized Name",
    "Coach",
    "Student",
    "Name Confidence",
    "Week Number",
    "Week Confidence",
    "Week Method",
    "Participants",
    "Date",
    "Duration (min)",
    "Source",
    "Processed At",
]
