"""Coach/student name resolution and standardized recording names."""

import structlog

from recording_identity.extraction import extract_name_pair, parse_folder_name
from recording_identity.identity.fuzzy_matcher import FuzzyMatcher
from recording_identity.identity.schemas import NameResolution, PersonEntry, PersonRole
from recording_identity.models import Recording
from recording_identity.weeks import WeekInferenceResult

logger = structlog.get_logger()

UNKNOWN = "Unknown"

# Per-side confidence (0-100)
ROSTER_CONFIDENCE = 95
FUZZY_CONFIDENCE = 85
UNVERIFIED_CONFIDENCE = 50
COACH_ONLY_CAP = 60


def _raw_pair(recording: Recording) -> tuple[str | None, str | None, str]:
    if recording.folder_name:
        folder = parse_folder_name(recording.folder_name)
        if folder.coach or folder.student:
            return folder.coach, folder.student, "folder_name"

    pair = extract_name_pair(recording.title)
    if pair:
        return pair.coach, pair.student, pair.method

    return None, None, "none"


def _side(
    raw: str | None,
    roster: list[PersonEntry],
    matcher: FuzzyMatcher,
) -> tuple[str | None, PersonEntry | None, int]:
    if not raw or raw.lower() == UNKNOWN.lower():
        return None, None, 0
    entry, score = matcher.find_best_match(raw, roster)
    if entry is None:
        return raw, None, UNVERIFIED_CONFIDENCE
    confidence = ROSTER_CONFIDENCE if score >= 1.0 else FUZZY_CONFIDENCE
    return entry.name, entry, confidence


def resolve_names(
    recording: Recording,
    roster: list[PersonEntry],
    matcher: FuzzyMatcher | None = None,
) -> NameResolution:
    """Work out who coached whom in a recording.

    Names come from the folder name (file-store), then the title, then
    the participant list. Each side is standardized against the roster;
    a pair written the wrong way round ("Student <> Coach") is swapped
    when the roster says so.

    Args:
        recording: Recording to resolve
        roster: Known coaches and students
        matcher: Name matcher (defaults to FuzzyMatcher())

    Returns:
        NameResolution with canonical names and a 0-100 confidence
    """
    matcher = matcher or FuzzyMatcher()
    raw_coach, raw_student, source = _raw_pair(recording)

    coach, coach_entry, coach_conf = _side(raw_coach, roster, matcher)
    student, student_entry, student_conf = _side(raw_student, roster, matcher)

    if (
        coach_entry is not None
        and student_entry is not None
        and coach_entry.role is PersonRole.STUDENT
        and student_entry.role is PersonRole.COACH
    ):
        coach, student = student, coach
        coach_conf, student_conf = student_conf, coach_conf

    if coach is None and student is None:
        coach, student, coach_conf, student_conf, source = _from_participants(
            recording, roster, matcher
        )

    if coach is None and student is None:
        return NameResolution(method="fallback")

    if student is None:
        confidence = min(coach_conf, COACH_ONLY_CAP)
    elif coach is None:
        confidence = min(student_conf, COACH_ONLY_CAP)
    else:
        confidence = min(coach_conf, student_conf)

    return NameResolution(
        coach=coach or UNKNOWN,
        student=student or UNKNOWN,
        confidence=confidence,
        method=source,
    )


def _from_participants(
    recording: Recording,
    roster: list[PersonEntry],
    matcher: FuzzyMatcher,
) -> tuple[str | None, str | None, int, int, str]:
    coach = student = None
    coach_conf = student_conf = 0
    for participant in recording.participants:
        entry, score = matcher.find_best_match(participant, roster)
        if entry is None:
            continue
        confidence = ROSTER_CONFIDENCE if score >= 1.0 else FUZZY_CONFIDENCE
        if entry.role is PersonRole.COACH and coach is None:
            coach, coach_conf = entry.name, confidence
        elif entry.role is PersonRole.STUDENT and student is None:
            student, student_conf = entry.name, confidence
    return coach, student, coach_conf, student_conf, "participants"


def _short(name: str) -> str:
    first = name.split()[0] if name.strip() else UNKNOWN
    return first.replace("_", "")


def build_standardized_name(
    recording: Recording,
    names: NameResolution,
    week: WeekInferenceResult | None = None,
    session_type: str | None = None,
) -> str:
    """Build the canonical recording name used by the ledger and file store.

    Format::

        {SessionType}_{SourceLetter}_{Coach}_{Student}_Wk{NN}_{YYYY-MM-DD}_M:{id}U:{uuid}

    Args:
        recording: Recording being named
        names: Resolved coach/student
        week: Week inference (Wk part is "WkUnknown" without one)
        session_type: Override; defaults to Coaching, or MISC without a student

    Returns:
        Standardized name string
    """
    if session_type is None:
        session_type = "Coaching" if names.student != UNKNOWN else "MISC"

    week_part = (
        f"Wk{week.week_number:02d}"
        if week is not None and week.week_number is not None
        else "WkUnknown"
    )
    session_date = recording.session_date
    date_part = session_date.isoformat() if session_date else "NoDate"

    parts = [
        session_type,
        recording.source_tag.letter,
        _short(names.coach),
        _short(names.student),
        week_part,
        date_part,
    ]
    suffix = ""
    if recording.secondary_id:
        suffix += f"M:{recording.secondary_id}"
    if recording.primary_id:
        suffix += f"U:{recording.primary_id}"
    if suffix:
        parts.append(suffix)
    return "_".join(parts)


class NameStandardizer:
    """Roster-bound name resolution.

    Holds the roster and matcher so callers resolving many recordings
    do not pass them around.
    """

    def __init__(
        self,
        roster: list[PersonEntry],
        matcher: FuzzyMatcher | None = None,
    ):
        self._roster = list(roster)
        self._matcher = matcher or FuzzyMatcher()

    @property
    def roster(self) -> list[PersonEntry]:
        return list(self._roster)

    def standardize(self, raw: str, role: PersonRole | None = None) -> str:
        """Canonical roster name for a raw name, or the raw name if unknown."""
        entry, _score = self._matcher.find_best_match(raw, self._roster, role)
        return entry.name if entry else raw

    def resolve(self, recording: Recording) -> NameResolution:
        resolution = resolve_names(recording, self._roster, self._matcher)
        if resolution.method == "fallback":
            logger.info(
                "No coach/student names found",
                recording_key=recording.key,
                title=recording.title,
            )
        return resolution
