"""Similarity scoring for cross-source record matching.

Composite score (weights sum to 1.0):
- 0.4 if session dates are within DATE_TOLERANCE
- 0.4 x participant overlap ratio
- 0.2 if secondary ids are equal
"""

from collections import Counter
from collections.abc import Sequence
from datetime import timedelta

from recording_identity.models import Recording

DATE_TOLERANCE = timedelta(hours=24)
PARTICIPANT_OVERLAP_THRESHOLD = 0.5

DATE_WEIGHT = 0.4
PARTICIPANT_WEIGHT = 0.4
SECONDARY_ID_WEIGHT = 0.2

# Scores are rounded so that e.g. 0.4 + 0.2 lands exactly on 0.6
SCORE_PRECISION = 6


def dates_within_tolerance(query: Recording, candidate: Recording) -> bool:
    """Check that two recordings started within DATE_TOLERANCE of each other.

    Missing timestamps never match. The tolerance is inclusive.
    """
    a, b = query.utc_timestamp, candidate.utc_timestamp
    if a is None or b is None:
        return False
    return abs(a - b) <= DATE_TOLERANCE


def participant_overlap(first: Sequence[str], second: Sequence[str]) -> float:
    """Share of participants two recordings have in common.

    |intersection| / max(|first|, |second|), comparing whole names
    case-insensitively (no substring matching).

    Returns:
        Ratio in [0, 1]; 0.0 when either side is empty
    """
    if not first or not second:
        return 0.0
    a = Counter(name.strip().casefold() for name in first)
    b = Counter(name.strip().casefold() for name in second)
    common = sum((a & b).values())
    return common / max(len(first), len(second))


def secondary_ids_equal(query: Recording, candidate: Recording) -> bool:
    """Check for an exact, non-empty secondary id match."""
    return bool(query.secondary_id) and query.secondary_id == candidate.secondary_id


def composite_score(query: Recording, candidate: Recording) -> float:
    """Weighted similarity between a query and a candidate record.

    Args:
        query: Record being resolved
        candidate: Record from the target corpus

    Returns:
        Score in [0, 1], monotonic in each component
    """
    score = 0.0
    if dates_within_tolerance(query, candidate):
        score += DATE_WEIGHT
    score += PARTICIPANT_WEIGHT * participant_overlap(
        query.participants, candidate.participants
    )
    if secondary_ids_equal(query, candidate):
        score += SECONDARY_ID_WEIGHT
    return round(score, SCORE_PRECISION)
