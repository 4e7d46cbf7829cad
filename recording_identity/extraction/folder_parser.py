"""Parse file-store folder names into identity fields.

Standardized folders look like::

    Coaching_A_Jenny_Aditi_Wk05_2024-03-05_M:8675309U:abcDEF123+/=
    Coaching_B_Rishi_Aarav_Wk12_2024-05-01_M_8675309_U_abcDEF123==
"""

import re
from dataclasses import dataclass, field
from datetime import date

from recording_identity.models import SourceTag

_UUID = re.compile(r"U[_:]([A-Za-z0-9+/=]+)")
_MEETING_ID = re.compile(r"M[_:](\d+)")
_DATE = re.compile(r"(\d{4}-\d{2}-\d{2})")
_WEEK = re.compile(r"_Wk(\d+)_")

_SOURCE_LETTERS = {
    "A": SourceTag.CLOUD_API,
    "B": SourceTag.WEBHOOK,
    "C": SourceTag.FILE_STORE,
}
_SOURCE_MARKER = re.compile(r"(?:^|_)([ABC])_")


@dataclass(frozen=True)
class FolderIdentity:
    """Identity fields recovered from a folder name."""

    folder_name: str
    primary_id: str | None = None
    secondary_id: str | None = None
    session_date: date | None = None
    source: SourceTag | None = None
    session_type: str | None = None
    coach: str | None = None
    student: str | None = None
    week: int | None = None
    participants: tuple[str, ...] = field(default=())

    @property
    def is_recording_folder(self) -> bool:
        """True when the folder carries a recording id."""
        return self.primary_id is not None


def _parse_date(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


def parse_folder_name(folder_name: str) -> FolderIdentity:
    """Parse a standardized folder name.

    Unrecognised names yield a FolderIdentity with only ``folder_name`` set,
    which callers treat as an intermediate (non-recording) folder.
    """
    uuid_match = _UUID.search(folder_name)
    if not uuid_match:
        return FolderIdentity(folder_name=folder_name)

    meeting_match = _MEETING_ID.search(folder_name)
    date_match = _DATE.search(folder_name)
    week_match = _WEEK.search(folder_name)
    source_match = _SOURCE_MARKER.search(folder_name)

    session_type = coach = student = None
    parts = folder_name.split("_")
    if source_match and len(parts) >= 4 and parts[1] in _SOURCE_LETTERS:
        session_type, coach, student = parts[0], parts[2], parts[3]

    participants = tuple(
        name for name in (coach, student) if name and name.lower() != "unknown"
    )

    return FolderIdentity(
        folder_name=folder_name,
        primary_id=uuid_match.group(1),
        secondary_id=meeting_match.group(1) if meeting_match else None,
        session_date=_parse_date(date_match.group(1) if date_match else None),
        source=_SOURCE_LETTERS[source_match.group(1)] if source_match else None,
        session_type=session_type,
        coach=coach,
        student=student,
        week=int(week_match.group(1)) if week_match else None,
        participants=participants,
    )
