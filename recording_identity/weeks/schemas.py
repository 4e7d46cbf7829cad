"""Week inference schemas.

Defines the inference context, per-tier results, and the final
WeekInferenceResult value object.
"""

from collections import Counter
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from recording_identity.models import Recording
from recording_identity.weeks.cache import WeekCache


class WeekMethod(str, Enum):
    """Which tier produced a week number."""

    TIMESTAMP = "timestamp_analysis"
    METADATA = "meeting_metadata"
    FOLDER_NAME = "folder_name"
    PATTERN = "pattern_matching"
    INTERPOLATION = "interpolation"
    EXTRAPOLATION_FORWARD = "extrapolation_forward"
    EXTRAPOLATION_BACKWARD = "extrapolation_backward"
    SEQUENTIAL = "sequential"
    PROGRAM_DEFAULT = "program_default"
    DEFAULT_FALLBACK = "default_fallback"


# Confidence per method (0-110 scale). Metadata and pattern tiers scale
# with pattern priority, see WeekConfidenceScale.
TIMESTAMP_CONFIDENCE = 100
INTERPOLATION_CONFIDENCE = 90
EXTRAPOLATION_CONFIDENCE = 85
FOLDER_NAME_CONFIDENCE = 80
SEQUENTIAL_CONFIDENCE = 75
PROGRAM_DEFAULT_CONFIDENCE = 70
DEFAULT_FALLBACK_CONFIDENCE = 10

SiblingLookup = Callable[[str, str], Sequence[Recording]]


@dataclass(frozen=True)
class WeekContext:
    """Everything the cascade may consult besides the recording itself.

    Attributes:
        program_start_date: First day of week 1 for this student's program.
        coach_name: Resolved coach name (sibling and cache lookups).
        student_name: Resolved student name (sibling and cache lookups).
        siblings_of: Returns all recordings for a coach/student pair.
        anchor_weeks: Known week numbers of siblings, keyed by Recording.key.
        week_cache: Historical (student, coach, date) -> week lookup.
        program_type: Program kind with a default calendar ("academic_year").
        version: Bumped by callers whenever any of the above changes.
    """

    program_start_date: date | datetime | None = None
    coach_name: str | None = None
    student_name: str | None = None
    siblings_of: SiblingLookup | None = None
    anchor_weeks: Mapping[str, int] = field(default_factory=dict)
    week_cache: WeekCache | None = None
    program_type: str | None = None
    version: str = "0"


@dataclass(frozen=True)
class TierResult:
    """Outcome of one tier attempt.

    ``week`` is None when the tier found nothing; ``evidence`` may still
    carry notes (exclusions, errors) in that case.
    """

    method: WeekMethod
    week: int | None = None
    confidence: int = 0
    evidence: tuple[str, ...] = ()


class WeekInferenceResult(BaseModel):
    """Final week assignment for one recording."""

    model_config = ConfigDict(frozen=True)

    recording_key: str = Field(description="Recording.key this result belongs to")
    week_number: int | None = Field(default=None, ge=1, le=52)
    confidence: int = Field(ge=0, le=110, description="0-110, see WeekMethod")
    method: WeekMethod
    evidence: tuple[str, ...] = Field(
        default=(), description="Human-readable justification, audit only"
    )

    def requires_review(self, threshold: int) -> bool:
        """Check whether this inference is too weak to accept unreviewed."""
        return self.week_number is None or self.confidence < threshold


class WeekInferenceStats(BaseModel):
    """Method usage tallies over a set of inferences."""

    total: int = 0
    by_method: dict[str, int] = Field(default_factory=dict)
    low_confidence: int = 0


def summarize_methods(
    results: Iterable[WeekInferenceResult], review_threshold: int = 70
) -> WeekInferenceStats:
    """Tally which methods produced a set of week inferences.

    Args:
        results: Week inference results
        review_threshold: Confidence below which a result counts as low

    Returns:
        WeekInferenceStats with counts in sorted method order
    """
    counts: Counter[str] = Counter()
    total = low = 0
    for result in results:
        total += 1
        counts[result.method.value] += 1
        if result.requires_review(review_threshold):
            low += 1
    return WeekInferenceStats(
        total=total,
        by_method=dict(sorted(counts.items())),
        low_confidence=low,
    )
