"""IdentityResolver reconciles a recording against another source's corpus.

Resolution pipeline (in order, first success wins):
1. Exact primary id (O(1) with index)
2. Secondary id + date within 24h (O(k) over shared secondary id)
3. Same date + participant overlap (O(k) over same-day records)
4. Weighted similarity scan (O(n), batch/offline use only)
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

import structlog

from recording_identity.identity.confidence import (
    PARTICIPANT_OVERLAP_THRESHOLD,
    SCORE_PRECISION,
    composite_score,
    dates_within_tolerance,
    participant_overlap,
)
from recording_identity.identity.index import TargetIndex
from recording_identity.identity.schemas import (
    AUTO_ACCEPT_THRESHOLD,
    SIMILARITY_FLOOR,
    MatchCandidate,
    MatchMethod,
    MatchResult,
    MatchStatus,
    status_for,
)
from recording_identity.models import Recording

logger = structlog.get_logger()

SECONDARY_ID_DATE_CONFIDENCE = 0.9
SECONDARY_ID_ONLY_SCORE = 0.7
DATE_PARTICIPANTS_WEIGHT = 0.8
REVIEW_CANDIDATE_LIMIT = 3


class MatchStrategy(Protocol):
    """One step of the matching cascade."""

    method: MatchMethod

    def attempt(
        self,
        query: Recording,
        index: TargetIndex,
        retained: list[MatchCandidate],
    ) -> MatchResult | None:
        """Return a match, or None to fall through to the next strategy.

        Strategies may append near-misses to ``retained`` for later steps.
        """
        ...


def _band(confidence: float) -> MatchStatus:
    return (
        MatchStatus.FUZZY_HIGH
        if confidence >= AUTO_ACCEPT_THRESHOLD
        else MatchStatus.FUZZY_LOW
    )


class PrimaryIdStrategy:
    """Direct hit on the primary id."""

    method = MatchMethod.PRIMARY_ID

    def attempt(
        self,
        query: Recording,
        index: TargetIndex,
        retained: list[MatchCandidate],
    ) -> MatchResult | None:
        if not query.primary_id:
            return None
        hits = index.by_primary_id.get(query.primary_id)
        if not hits:
            return None
        return MatchResult(
            query_key=query.key,
            status=MatchStatus.EXACT,
            confidence=1.0,
            matched_identity=hits[0],
            method=self.method,
        )


class SecondaryIdDateStrategy:
    """Shared secondary id, session dates within tolerance."""

    method = MatchMethod.SECONDARY_ID_DATE

    def attempt(
        self,
        query: Recording,
        index: TargetIndex,
        retained: list[MatchCandidate],
    ) -> MatchResult | None:
        if not query.secondary_id:
            return None
        hits = index.by_secondary_id.get(query.secondary_id, ())
        for candidate in hits:
            if dates_within_tolerance(query, candidate):
                return MatchResult(
                    query_key=query.key,
                    status=_band(SECONDARY_ID_DATE_CONFIDENCE),
                    confidence=SECONDARY_ID_DATE_CONFIDENCE,
                    matched_identity=candidate,
                    method=self.method,
                )

        # Repeated meetings share ids; keep them as weaker evidence
        retained.extend(
            MatchCandidate(
                record=candidate,
                score=SECONDARY_ID_ONLY_SCORE,
                reason="Secondary id matches, different date",
            )
            for candidate in hits
        )
        return None


class DateParticipantsStrategy:
    """Same session date and mostly the same participants."""

    method = MatchMethod.DATE_PARTICIPANTS

    def attempt(
        self,
        query: Recording,
        index: TargetIndex,
        retained: list[MatchCandidate],
    ) -> MatchResult | None:
        session_date = query.session_date
        if session_date is None:
            return None
        for candidate in index.by_date.get(session_date, ()):
            overlap = participant_overlap(query.participants, candidate.participants)
            if overlap > PARTICIPANT_OVERLAP_THRESHOLD:
                confidence = round(DATE_PARTICIPANTS_WEIGHT * overlap, SCORE_PRECISION)
                return MatchResult(
                    query_key=query.key,
                    status=_band(confidence),
                    confidence=confidence,
                    matched_identity=candidate,
                    method=self.method,
                )
        return None


class SimilarityStrategy:
    """Weighted similarity over the whole corpus.

    Candidates scoring at least SIMILARITY_FLOOR are ranked by score,
    ties by index insertion order. The top three travel with the result
    for human review.
    """

    method = MatchMethod.SIMILARITY

    def attempt(
        self,
        query: Recording,
        index: TargetIndex,
        retained: list[MatchCandidate],
    ) -> MatchResult | None:
        best_by_record: dict[int, MatchCandidate] = {}

        def keep(candidate: MatchCandidate) -> None:
            current = best_by_record.get(id(candidate.record))
            if current is None or candidate.score > current.score:
                best_by_record[id(candidate.record)] = candidate

        for candidate in retained:
            keep(candidate)

        for record in index.records:
            score = composite_score(query, record)
            if score >= SIMILARITY_FLOOR:
                keep(
                    MatchCandidate(
                        record=record,
                        score=score,
                        reason="Date/participant/secondary id similarity",
                    )
                )

        if not best_by_record:
            return None

        ranked = sorted(
            best_by_record.values(),
            key=lambda c: (-c.score, index.position(c.record)),
        )
        best = ranked[0]
        return MatchResult(
            query_key=query.key,
            status=status_for(best.score),
            confidence=best.score,
            matched_identity=best.record,
            method=self.method,
            candidates=tuple(ranked[:REVIEW_CANDIDATE_LIMIT]),
        )


def default_strategies() -> list[MatchStrategy]:
    """Matching cascade in evaluation order."""
    return [
        PrimaryIdStrategy(),
        SecondaryIdDateStrategy(),
        DateParticipantsStrategy(),
        SimilarityStrategy(),
    ]


def unmatched(query: Recording) -> MatchResult:
    """Result for a query nothing resembles."""
    return MatchResult(
        query_key=query.key,
        status=MatchStatus.UNMATCHED,
        confidence=0.0,
        method=MatchMethod.NONE,
    )


class IdentityResolver:
    """Orchestrates multi-stage record matching.

    Pure with respect to its inputs: neither the query nor the index is
    modified, and identical inputs give identical results.
    """

    def __init__(self, strategies: Sequence[MatchStrategy] | None = None):
        """Initialize resolver.

        Args:
            strategies: Override the default cascade (evaluation order).
        """
        self._strategies = list(strategies or default_strategies())

    def find_match(self, query: Recording, index: TargetIndex) -> MatchResult:
        """Match a query record against one target index.

        Args:
            query: Record to resolve
            index: Pre-built, read-only target index

        Returns:
            MatchResult; ``unmatched`` when no strategy succeeds
        """
        retained: list[MatchCandidate] = []
        for strategy in self._strategies:
            result = strategy.attempt(query, index, retained)
            if result is not None:
                logger.debug(
                    "Record matched",
                    query_key=query.key,
                    index=index.name,
                    status=result.status.value,
                    method=result.method.value,
                    confidence=result.confidence,
                )
                return result
        return unmatched(query)

    def find_best_match(
        self, query: Recording, indices: Iterable[TargetIndex]
    ) -> MatchResult:
        """Match against several indices and keep the strongest result.

        An exact match returns immediately. Otherwise the highest
        confidence wins; ties keep the earlier index.
        """
        result, _index = self.locate(query, indices)
        return result

    def locate(
        self, query: Recording, indices: Iterable[TargetIndex]
    ) -> tuple[MatchResult, TargetIndex | None]:
        """Like find_best_match, also returning the index that matched."""
        best: tuple[MatchResult, TargetIndex] | None = None
        for index in indices:
            result = self.find_match(query, index)
            if result.status is MatchStatus.EXACT:
                return result, index
            if result.status is MatchStatus.UNMATCHED:
                continue
            if best is None or result.confidence > best[0].confidence:
                best = (result, index)
        if best is None:
            return unmatched(query), None
        return best

    def match_all(
        self, queries: Iterable[Recording], index: TargetIndex
    ) -> list[MatchResult]:
        """Match many records against one index.

        Returns:
            List of results in same order as queries
        """
        return [self.find_match(query, index) for query in queries]


def find_match(query: Recording, target_index: TargetIndex) -> MatchResult:
    """Match a record with the default strategy cascade."""
    return IdentityResolver().find_match(query, target_index)
