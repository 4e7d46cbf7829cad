"""Declarative week-reference pattern tables.

Each row is a ``WeekPattern``. Tables are ordered: the first row whose
regex yields an acceptable number wins. Priorities drive confidence in the
metadata and pattern-fallback tiers (1 = most explicit).
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class WeekPattern:
    """One row of a week pattern table.

    Attributes:
        regex: Compiled pattern with one or two capture groups holding numbers.
            Two groups are synonyms ("Week 4 | Session 4").
        label: Human-readable pattern name used in evidence strings.
        priority: 1 (explicit) .. 6 (loosest).
        exclude_if_followed_by: Word that disqualifies a match when it comes
            right after it ("12 week program").
        excluded: Row only exists to recognise and reject a phrase.
        generic: Bare-number row, used only when nothing else matched.
    """

    regex: re.Pattern
    label: str
    priority: int
    exclude_if_followed_by: str | None = "program"
    excluded: bool = False
    generic: bool = False


def _p(pattern: str, label: str, priority: int, flags: int = 0, **kwargs) -> WeekPattern:
    return WeekPattern(re.compile(pattern, flags), label, priority, **kwargs)


# fmt: off
WEEK_PATTERNS: tuple[WeekPattern, ...] = (
    # Combined "Week X | Session Y" forms come first so both groups are seen
    _p(r"[Ww]eek\s+(\d+)\s*\|\s*Session\s+(\d+)", "Week X | Session Y", 1),
    _p(r"Session\s+(\d+)\s*\|\s*[Ww]eek\s+(\d+)", "Session X | Week Y", 1),

    # Explicit references
    _p(r"[Ww]k\s*#?\s*(\d+[A-Z]?)", "Wk #X", 1),
    _p(r"[Ww]eek\s*#?\s*(\d+[A-Z]?)", "Week #X", 1),
    _p(r"Session\s*#?\s*(\d+[A-Z]?)", "Session #X", 1),
    _p(r"Class\s*#?\s*(\d+[A-Z]?)", "Class #X", 1),
    _p(r"Lesson\s*#?\s*(\d+[A-Z]?)", "Lesson #X", 1),

    # Embedded references
    _p(r"_W(\d+[A-Z]?)_", "_WX_", 2),
    _p(r"\bW(\d+[A-Z]?)\b", "WX", 2),
    _p(r"Week(\d+[A-Z]?)", "WeekX", 2, re.IGNORECASE),
    _p(r"Session(\d+[A-Z]?)", "SessionX", 2, re.IGNORECASE),
    _p(r"Class(\d+[A-Z]?)", "ClassX", 2, re.IGNORECASE),
    _p(r"Lesson(\d+[A-Z]?)", "LessonX", 2, re.IGNORECASE),

    # Contextual references
    _p(r"Class\s*(\d+[A-Z]?)", "Class X", 3, re.IGNORECASE),
    _p(r"(\d+[A-Z]?)\s*[Ww]k", "X Wk", 3, re.IGNORECASE),
    _p(r"(\d+[A-Z]?)\s*[Ww]eek", "X Week", 3, re.IGNORECASE),
    _p(r"(\d+[A-Z]?)\s*Session", "X Session", 3, re.IGNORECASE),
    _p(r"(\d+[A-Z]?)\s*Class", "X Class", 3, re.IGNORECASE),
    _p(r"(\d+[A-Z]?)\s*Lesson", "X Lesson", 3, re.IGNORECASE),

    # Ordinal / "week of" forms
    _p(r"Week\s*of\s*(\d+)", "Week of X", 4, re.IGNORECASE),
    _p(r"(\d+)\s*(?:st|nd|rd|th)\s*[Ww]eek", "Xth Week", 4, re.IGNORECASE),

    # Program durations are recognised only to be rejected
    _p(r"(\d+)\s*-?\s*weeks?\s*program", "X week program", 4, re.IGNORECASE,
       excluded=True),

    # Loose hyphenated forms ("3-week check-in")
    _p(r"(\d+)-week", "X-week", 6, re.IGNORECASE),

    # Bare numbers
    _p(r"\b(\d{1,2})\b", "Generic Number", 5, generic=True),
)

FOLDER_PATTERNS: tuple[WeekPattern, ...] = (
    _p(r"_Wk(\d+)_", "_WkX_", 1),
    _p(r"_Week(\d+)_", "_WeekX_", 1),
    _p(r"_W(\d+)_", "_WX_", 1),
    _p(r"Wk(\d+)", "WkX", 1),
    _p(r"Week(\d+)", "WeekX", 1),
)
# fmt: on

# Highest priority considered an explicit reference by the metadata tier
METADATA_MAX_PRIORITY = 4


def metadata_patterns() -> tuple[WeekPattern, ...]:
    """Rows the metadata tier scans titles with."""
    return tuple(
        p for p in WEEK_PATTERNS if p.priority <= METADATA_MAX_PRIORITY and not p.generic
    )
