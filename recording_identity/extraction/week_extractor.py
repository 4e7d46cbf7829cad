"""Generic week-number extraction over a pattern table."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from recording_identity.extraction.patterns import WeekPattern

MIN_WEEK = 1
MAX_WEEK = 52

_LEADING_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class PatternHit:
    """Accepted match of a pattern row."""

    week: int
    pattern: WeekPattern
    matched_text: str


@dataclass
class ExtractionOutcome:
    """Result of scanning one text against a table."""

    hit: PatternHit | None = None
    notes: list[str] = field(default_factory=list)
    any_matched: bool = False


def is_valid_week(value: int | None) -> bool:
    """Check that a week number is inside the program range."""
    return value is not None and MIN_WEEK <= value <= MAX_WEEK


def parse_week_token(token: str | None) -> int | None:
    """Parse "7" or "7A" into 7; anything else into None."""
    if not token:
        return None
    match = _LEADING_DIGITS.match(token)
    return int(match.group()) if match else None


def _followed_by(text: str, end: int, word: str) -> bool:
    # A plural "s" left after the match belongs to the unit ("12 week|s program")
    rest = text[end:]
    return (
        re.match(rf"s?\s*-?\s*{re.escape(word)}\b", rest, re.IGNORECASE) is not None
    )


def _week_from_groups(match: re.Match) -> int | None:
    # Multiple groups are synonyms; take the first one in range
    for token in match.groups():
        week = parse_week_token(token)
        if is_valid_week(week):
            return week
    return None


def extract_week(
    text: str | None,
    patterns: Iterable[WeekPattern],
    *,
    allow_generic: bool = True,
) -> ExtractionOutcome:
    """Scan text with a pattern table and return the first acceptable week.

    Rows are tried in table order. Within a row every occurrence is tried
    left to right, so an excluded "12 week program" does not hide a later
    "3 week" in the same text. Generic bare-number rows only run when no
    other row matched anything at all, excluded matches included.

    Args:
        text: Text to scan. None or empty yields an empty outcome.
        patterns: Ordered table of WeekPattern rows.
        allow_generic: Whether generic rows may be used as a last resort.

    Returns:
        ExtractionOutcome with the accepted hit (if any), evidence notes,
        and whether any row matched.
    """
    outcome = ExtractionOutcome()
    if not text:
        return outcome

    rows = list(patterns)
    generic_rows = [row for row in rows if row.generic]

    for row in rows:
        if row.generic:
            continue
        hit = _scan_row(text, row, outcome)
        if hit:
            outcome.hit = hit
            return outcome

    if allow_generic and not outcome.any_matched:
        for row in generic_rows:
            hit = _scan_row(text, row, outcome)
            if hit:
                outcome.hit = hit
                return outcome

    return outcome


def _scan_row(
    text: str, row: WeekPattern, outcome: ExtractionOutcome
) -> PatternHit | None:
    for match in row.regex.finditer(text):
        outcome.any_matched = True
        if row.excluded:
            outcome.notes.append(f"Excluded pattern: {row.label} ({match.group(0)})")
            continue
        if row.exclude_if_followed_by and _followed_by(
            text, match.end(), row.exclude_if_followed_by
        ):
            outcome.notes.append(
                f"Excluded pattern due to '{row.exclude_if_followed_by}' "
                f"context: {row.label} ({match.group(0)})"
            )
            continue
        week = _week_from_groups(match)
        if week is not None:
            return PatternHit(week=week, pattern=row, matched_text=match.group(0))
    return None
