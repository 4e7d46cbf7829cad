"""Identity resolution module.

This module provides:
- IdentityResolver: cross-source record matching cascade
- TargetIndex: read-only lookup views over a target corpus
- FuzzyMatcher / NameStandardizer: roster-based coach/student names
- build_standardized_name: canonical recording names
"""

from recording_identity.identity.confidence import (
    DATE_TOLERANCE,
    PARTICIPANT_OVERLAP_THRESHOLD,
    composite_score,
    participant_overlap,
)
from recording_identity.identity.fuzzy_matcher import FuzzyMatcher
from recording_identity.identity.index import TargetIndex
from recording_identity.identity.naming import (
    NameStandardizer,
    build_standardized_name,
    resolve_names,
)
from recording_identity.identity.resolver import IdentityResolver, find_match
from recording_identity.identity.schemas import (
    AUTO_ACCEPT_THRESHOLD,
    SIMILARITY_FLOOR,
    MatchCandidate,
    MatchMethod,
    MatchResult,
    MatchStatus,
    NameResolution,
    PersonEntry,
    PersonRole,
)

__all__ = [
    "AUTO_ACCEPT_THRESHOLD",
    "DATE_TOLERANCE",
    "PARTICIPANT_OVERLAP_THRESHOLD",
    "SIMILARITY_FLOOR",
    "FuzzyMatcher",
    "IdentityResolver",
    "MatchCandidate",
    "MatchMethod",
    "MatchResult",
    "MatchStatus",
    "NameResolution",
    "NameStandardizer",
    "PersonEntry",
    "PersonRole",
    "TargetIndex",
    "build_standardized_name",
    "composite_score",
    "find_match",
    "participant_overlap",
    "resolve_names",
]
