"""Evidence extractors.

Pure functions that pull one signal out of one piece of context:
- Week numbers from titles and folder names (declarative pattern tables)
- Participant and coach/student names from titles
- Identity fields from standardized file-store folder names
- Timestamps from loosely formatted source dates
- Speaker names from VTT transcripts
"""

from recording_identity.extraction.date_normalizer import parse_timestamp
from recording_identity.extraction.folder_parser import FolderIdentity, parse_folder_name
from recording_identity.extraction.names import (
    NamePair,
    extract_name_pair,
    extract_participants,
)
from recording_identity.extraction.patterns import (
    FOLDER_PATTERNS,
    WEEK_PATTERNS,
    WeekPattern,
    metadata_patterns,
)
from recording_identity.extraction.transcript import extract_speakers
from recording_identity.extraction.week_extractor import (
    MAX_WEEK,
    MIN_WEEK,
    ExtractionOutcome,
    PatternHit,
    extract_week,
    is_valid_week,
)

__all__ = [
    "FOLDER_PATTERNS",
    "MAX_WEEK",
    "MIN_WEEK",
    "WEEK_PATTERNS",
    "ExtractionOutcome",
    "FolderIdentity",
    "NamePair",
    "PatternHit",
    "WeekPattern",
    "extract_name_pair",
    "extract_participants",
    "extract_speakers",
    "extract_week",
    "is_valid_week",
    "metadata_patterns",
    "parse_folder_name",
    "parse_timestamp",
]
