"""Week inference tiers.

Each tier is a strategy object exposing ``attempt(recording, context)``
and returning a TierResult. The inferencer owns the ordering; adding or
reordering tiers is a change to its tier lists only.
"""

import math
from datetime import UTC, date, datetime, timedelta
from typing import Protocol

import structlog

from recording_identity.config import WeekConfidenceScale
from recording_identity.extraction import (
    FOLDER_PATTERNS,
    MAX_WEEK,
    MIN_WEEK,
    WEEK_PATTERNS,
    ExtractionOutcome,
    extract_week,
    is_valid_week,
    metadata_patterns,
)
from recording_identity.models import Recording, SourceTag, as_utc
from recording_identity.weeks.schemas import (
    EXTRAPOLATION_CONFIDENCE,
    FOLDER_NAME_CONFIDENCE,
    INTERPOLATION_CONFIDENCE,
    PROGRAM_DEFAULT_CONFIDENCE,
    SEQUENTIAL_CONFIDENCE,
    TIMESTAMP_CONFIDENCE,
    TierResult,
    WeekContext,
    WeekMethod,
)

logger = structlog.get_logger()

ONE_WEEK = timedelta(days=7)

# Program kinds with a fixed calendar start: (month, day)
PROGRAM_CALENDARS: dict[str, tuple[int, int]] = {
    "academic_year": (9, 1),
    "calendar_year": (1, 1),
}


class WeekTier(Protocol):
    """Uniform interface of a cascade tier."""

    method: WeekMethod

    def attempt(self, recording: Recording, context: WeekContext) -> TierResult:
        """Try to infer a week; return a TierResult with week=None on failure."""
        ...


def _start_of(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    return datetime(value.year, value.month, value.day, tzinfo=UTC)


def _clamp(week: int) -> int:
    return max(MIN_WEEK, min(MAX_WEEK, week))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class TimestampTier:
    """Week from elapsed time since program start, or a historical mapping."""

    method = WeekMethod.TIMESTAMP

    def attempt(self, recording: Recording, context: WeekContext) -> TierResult:
        ts = recording.utc_timestamp
        if ts is None:
            return TierResult(self.method)

        week: int | None = None
        evidence: list[str] = []

        if context.program_start_date is not None:
            start = _start_of(context.program_start_date)
            weeks_since = (ts - start) // ONE_WEEK
            candidate = weeks_since + 1
            if is_valid_week(candidate):
                week = candidate
                evidence.append(
                    f"Calculated from program start: {start.date().isoformat()}"
                )
                evidence.append(f"Weeks since start: {weeks_since}")
            else:
                evidence.append(
                    f"Timestamp outside program range (week {candidate})"
                )

        if context.week_cache is not None and context.student_name and context.coach_name:
            try:
                cached = context.week_cache.get(
                    context.student_name, context.coach_name, ts.date()
                )
            except Exception as e:
                logger.warning(
                    "Week cache lookup failed",
                    recording_key=recording.key,
                    error=str(e),
                )
                evidence.append(f"Week cache lookup error: {e}")
                cached = None
            if is_valid_week(cached):
                week = cached
                evidence.append("Found in historical week mapping cache")

        if week is None:
            return TierResult(self.method, evidence=tuple(evidence))
        return TierResult(self.method, week, TIMESTAMP_CONFIDENCE, tuple(evidence))


def _pattern_result(
    method: WeekMethod,
    source: str,
    text: str,
    outcome: ExtractionOutcome,
    confidence: int,
) -> TierResult:
    hit = outcome.hit
    if hit is None:
        return TierResult(method, evidence=tuple(outcome.notes))
    evidence = (
        *outcome.notes,
        f"Extracted from {source}: \"{text}\"",
        f"Pattern: {hit.pattern.label} ({hit.matched_text})",
        f"Priority: {hit.pattern.priority}",
    )
    return TierResult(method, hit.week, confidence, evidence)


class MetadataTier:
    """Explicit week/session/class/lesson references in the title."""

    method = WeekMethod.METADATA

    def __init__(self, scale: WeekConfidenceScale):
        self._scale = scale
        self._patterns = metadata_patterns()

    def attempt(self, recording: Recording, context: WeekContext) -> TierResult:
        title = recording.title
        outcome = extract_week(title, self._patterns, allow_generic=False)
        confidence = (
            self._scale.metadata_confidence(outcome.hit.pattern.priority)
            if outcome.hit
            else 0
        )
        return _pattern_result(self.method, "topic", title, outcome, confidence)


class FolderNameTier:
    """Week markers in a file-store folder name."""

    method = WeekMethod.FOLDER_NAME

    def attempt(self, recording: Recording, context: WeekContext) -> TierResult:
        if recording.source_tag is not SourceTag.FILE_STORE:
            return TierResult(self.method)
        folder = recording.folder_name
        if not folder:
            return TierResult(self.method)
        outcome = extract_week(folder, FOLDER_PATTERNS, allow_generic=False)
        return _pattern_result(
            self.method, "folder", folder, outcome, FOLDER_NAME_CONFIDENCE
        )


class PatternTier:
    """Full pattern table over title, description, and folder name."""

    method = WeekMethod.PATTERN

    def __init__(self, scale: WeekConfidenceScale):
        self._scale = scale

    def attempt(self, recording: Recording, context: WeekContext) -> TierResult:
        text = " ".join(
            part
            for part in (recording.title, recording.description, recording.folder_name)
            if part
        )
        outcome = extract_week(text, WEEK_PATTERNS)
        confidence = (
            self._scale.pattern_confidence(outcome.hit.pattern.priority)
            if outcome.hit
            else 0
        )
        return _pattern_result(self.method, "text", text, outcome, confidence)


class RelativePositionTier:
    """Position among the coach/student pair's other recordings.

    Anchors are siblings whose week is already known. With anchors on both
    sides the week is interpolated; with one side it is extrapolated by
    session count; with none it is the sequential position.
    """

    method = WeekMethod.SEQUENTIAL

    def attempt(self, recording: Recording, context: WeekContext) -> TierResult:
        if not (context.siblings_of and context.coach_name and context.student_name):
            return TierResult(self.method)

        siblings = context.siblings_of(context.coach_name, context.student_name)
        ordered = self._ordered(recording, siblings)
        if len(ordered) < 2:
            return TierResult(self.method)

        position = next(i for i, r in enumerate(ordered) if r.key == recording.key)
        anchors = [
            (index, context.anchor_weeks[r.key])
            for index, r in enumerate(ordered)
            if r.key != recording.key and is_valid_week(context.anchor_weeks.get(r.key))
        ]

        if not anchors:
            return TierResult(
                WeekMethod.SEQUENTIAL,
                _clamp(position + 1),
                SEQUENTIAL_CONFIDENCE,
                (f"Sequential position: {position + 1} of {len(ordered)}",),
            )

        return self._from_anchors(position, anchors)

    @staticmethod
    def _ordered(recording: Recording, siblings) -> list[Recording]:
        seen: set[str] = set()
        merged: list[Recording] = []
        for item in [*siblings, recording]:
            if item.key not in seen:
                seen.add(item.key)
                merged.append(item)
        # Stable: equal timestamps keep lookup order, undated sort last
        earliest = datetime.min.replace(tzinfo=UTC)
        return sorted(
            merged,
            key=lambda r: (r.utc_timestamp is None, r.utc_timestamp or earliest),
        )

    def _from_anchors(
        self, position: int, anchors: list[tuple[int, int]]
    ) -> TierResult:
        before = [a for a in anchors if a[0] < position]
        after = [a for a in anchors if a[0] > position]

        if before and after:
            (b_index, b_week), (a_index, a_week) = before[-1], after[0]
            relative = position - b_index
            span = a_index - b_index
            week = b_week + _round_half_up((a_week - b_week) / span * relative)
            return TierResult(
                WeekMethod.INTERPOLATION,
                _clamp(week),
                INTERPOLATION_CONFIDENCE,
                (
                    f"Interpolated between week {b_week} and {a_week}",
                    f"Position {relative} of {span} sessions",
                ),
            )

        if before:
            b_index, b_week = before[-1]
            since = position - b_index
            return TierResult(
                WeekMethod.EXTRAPOLATION_FORWARD,
                _clamp(b_week + since),
                EXTRAPOLATION_CONFIDENCE,
                (f"Extrapolated from week {b_week}", f"{since} sessions later"),
            )

        a_index, a_week = after[0]
        until = a_index - position
        return TierResult(
            WeekMethod.EXTRAPOLATION_BACKWARD,
            _clamp(a_week - until),
            EXTRAPOLATION_CONFIDENCE,
            (f"Extrapolated from week {a_week}", f"{until} sessions before"),
        )


class ProgramDefaultTier:
    """Week from the default calendar of the program type."""

    method = WeekMethod.PROGRAM_DEFAULT

    def attempt(self, recording: Recording, context: WeekContext) -> TierResult:
        ts = recording.utc_timestamp
        calendar = PROGRAM_CALENDARS.get(context.program_type or "")
        if ts is None or calendar is None:
            return TierResult(self.method)

        month, day = calendar
        year = ts.year if (ts.month, ts.day) >= (month, day) else ts.year - 1
        start = datetime(year, month, day, tzinfo=UTC)
        week = (ts - start) // ONE_WEEK + 1
        if not is_valid_week(week):
            return TierResult(self.method)
        return TierResult(
            self.method,
            week,
            PROGRAM_DEFAULT_CONFIDENCE,
            (f"Inferred from {context.program_type} start {start.date().isoformat()}",),
        )
