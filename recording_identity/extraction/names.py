"""Participant and coach/student name extraction from titles.

Titles follow a small family of conventions:
- "Jenny <> Aditi", "Coach Jenny <> Aditi | Week 3"
- "Jenny & Aditi", "Jenny and Aditi"
- "Noor Hassan's Personal Meeting Room" (coach only)
"""

import re
from dataclasses import dataclass

# fmt: off
_PAIR_PATTERNS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"Coach\s+(\w+)\s*<>\s*(\w+)"), "coach_arrow"),
    (re.compile(r"(\w+)\s*<>\s*(\w+)"), "arrow"),
    (re.compile(r"(\w+)\s*&\s*(\w+)"), "ampersand"),
    (re.compile(r"(\w+)\s+and\s+(\w+)", re.IGNORECASE), "and"),
)
# fmt: on

_PERSONAL_ROOM = re.compile(
    r"^\s*(.+?)(?:'s|’s)\s+(?:Personal Meeting Room|Zoom Meeting)", re.IGNORECASE
)

_NOISE_WORDS = {"ivylevel", "coach", "coaching", "session", "week", "wk", "the"}


@dataclass(frozen=True)
class NamePair:
    """Coach/student names read off a title."""

    coach: str | None
    student: str | None
    method: str


def _clean(token: str) -> str | None:
    token = token.strip()
    if not token or token.isdigit() or token.lower() in _NOISE_WORDS:
        return None
    return token


def extract_participants(title: str | None) -> list[str]:
    """Extract participant first names from a title.

    Args:
        title: Recording title or folder label

    Returns:
        Names in title order; empty list when no convention matched
    """
    if not title:
        return []

    for pattern, _method in _PAIR_PATTERNS:
        match = pattern.search(title)
        if match:
            names = [_clean(group) for group in match.groups()]
            return [name for name in names if name]

    return []


def extract_name_pair(title: str | None) -> NamePair | None:
    """Extract a coach/student pair from a title.

    "<>" titles put the coach first. Personal meeting rooms identify
    the coach only.

    Returns:
        NamePair or None when the title carries no names
    """
    if not title:
        return None

    for pattern, method in _PAIR_PATTERNS:
        match = pattern.search(title)
        if match:
            coach, student = (_clean(group) for group in match.groups())
            if coach or student:
                return NamePair(coach=coach, student=student, method=method)

    room = _PERSONAL_ROOM.match(title)
    if room:
        owner = room.group(1).strip().split()[0]
        return NamePair(coach=owner, student=None, method="personal_meeting_room")

    return None
