"""Identity resolution schemas.

Defines data models for roster entries, cross-source match results,
and coach/student name resolution.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from recording_identity.models import Recording

# Fixed design constants; not configurable.
AUTO_ACCEPT_THRESHOLD = 0.8
SIMILARITY_FLOOR = 0.6


class PersonRole(str, Enum):
    """Role of a roster entry."""

    COACH = "coach"
    STUDENT = "student"


class PersonEntry(BaseModel):
    """Coach or student in the program roster.

    Represents a single row from the roster spreadsheet.
    """

    name: str = Field(description="Canonical full name")
    role: PersonRole = Field(description="coach or student")
    email: str | None = Field(default=None, description="Contact email")
    aliases: list[str] = Field(
        default_factory=list,
        description="Known nicknames/variations (from Aliases column)",
    )

    @property
    def first_name(self) -> str:
        """First token of the canonical name."""
        return self.name.split()[0] if self.name.strip() else self.name


class MatchStatus(str, Enum):
    """Confidence band of a cross-source match."""

    EXACT = "exact"
    FUZZY_HIGH = "fuzzy-high"
    FUZZY_LOW = "fuzzy-low"
    UNMATCHED = "unmatched"


class MatchMethod(str, Enum):
    """Strategy that produced a match."""

    PRIMARY_ID = "primary_id"
    SECONDARY_ID_DATE = "secondary_id_date"
    DATE_PARTICIPANTS = "date_participants"
    SIMILARITY = "similarity"
    NONE = "none"


def status_for(confidence: float) -> MatchStatus:
    """Band a non-exact match confidence.

    >= 0.8 is auto-acceptable, >= 0.6 needs review, anything lower
    is not a match.
    """
    if confidence >= AUTO_ACCEPT_THRESHOLD:
        return MatchStatus.FUZZY_HIGH
    if confidence >= SIMILARITY_FLOOR:
        return MatchStatus.FUZZY_LOW
    return MatchStatus.UNMATCHED


class MatchCandidate(BaseModel):
    """A target record considered for a match, with its score."""

    model_config = ConfigDict(frozen=True)

    record: Recording
    score: float = Field(ge=0.0, le=1.0)
    reason: str = Field(description="Why this candidate was considered")


class MatchResult(BaseModel):
    """Result of matching one query record against a target index."""

    model_config = ConfigDict(frozen=True)

    query_key: str = Field(description="Recording.key of the query")
    status: MatchStatus
    confidence: float = Field(ge=0.0, le=1.0)
    matched_identity: Recording | None = Field(
        default=None, description="Matched record in the target index"
    )
    method: MatchMethod = MatchMethod.NONE
    candidates: tuple[MatchCandidate, ...] = Field(
        default=(), description="Top candidates for human review"
    )

    @property
    def requires_review(self) -> bool:
        """True if a human must confirm or reject this match."""
        return self.status is MatchStatus.FUZZY_LOW

    @property
    def is_matched(self) -> bool:
        """True for auto-acceptable matches (exact or fuzzy-high)."""
        return self.status in (MatchStatus.EXACT, MatchStatus.FUZZY_HIGH)


class NameResolution(BaseModel):
    """Coach/student identity of a recording."""

    model_config = ConfigDict(frozen=True)

    coach: str = Field(default="Unknown")
    student: str = Field(default="Unknown")
    confidence: int = Field(default=0, ge=0, le=100, description="0-100")
    method: str = Field(default="fallback", description="How names were found")
