"""Reconciliation report builder.

Runs the identity matcher for every query record against one or more
target indices and buckets the outcomes:
- exact_matches: primary id hit
- fuzzy_matches: fuzzy-high, auto-acceptable
- possible_matches: fuzzy-low, human review
- not_found: nothing cleared the similarity floor
"""

from collections import Counter
from collections.abc import Iterable, Sequence

import structlog

from recording_identity.config import get_settings
from recording_identity.identity import (
    IdentityResolver,
    MatchStatus,
    TargetIndex,
)
from recording_identity.models import Recording
from recording_identity.reconciliation.schemas import (
    ReconciliationEntry,
    ReconciliationReport,
    assess,
)
from recording_identity.weeks import WeekInferenceResult, summarize_methods

logger = structlog.get_logger()

MATCH_RATE_PRECISION = 1


def dedupe_by_key(records: Iterable[Recording]) -> list[Recording]:
    """Drop repeated keys, keeping the first occurrence in input order."""
    seen: set[str] = set()
    unique: list[Recording] = []
    for record in records:
        if record.key in seen:
            continue
        seen.add(record.key)
        unique.append(record)
    return unique


class ReconciliationReportBuilder:
    """Builds deterministic reconciliation reports.

    Inputs are never modified; the same inputs always give the same report.
    """

    def __init__(
        self,
        resolver: IdentityResolver | None = None,
        week_review_threshold: int | None = None,
    ):
        """Initialize builder.

        Args:
            resolver: Matcher to use (defaults to IdentityResolver())
            week_review_threshold: Week confidence below which a recording
                is queued for review. Defaults to settings.
        """
        self._resolver = resolver or IdentityResolver()
        self._week_threshold = (
            week_review_threshold
            if week_review_threshold is not None
            else get_settings().week_review_threshold
        )

    def build(
        self,
        queries: Iterable[Recording],
        indices: Sequence[TargetIndex],
        week_results: Iterable[WeekInferenceResult] | None = None,
    ) -> ReconciliationReport:
        """Reconcile query records against target indices.

        Args:
            queries: Records to account for (duplicates by key are dropped)
            indices: Target indices, in tie-break order
            week_results: Optional week inferences to tally and review

        Returns:
            ReconciliationReport
        """
        buckets: dict[MatchStatus, list[ReconciliationEntry]] = {
            status: [] for status in MatchStatus
        }
        methods: Counter[str] = Counter()
        review: list[str] = []

        unique = dedupe_by_key(queries)
        for query in unique:
            result, index = self._resolver.locate(query, indices)
            buckets[result.status].append(
                ReconciliationEntry(
                    key=query.key,
                    title=query.title,
                    result=result,
                    index_name=index.name if index else None,
                )
            )
            methods[result.method.value] += 1
            if result.requires_review:
                review.append(query.key)

        week_stats = None
        if week_results is not None:
            weeks = list(week_results)
            week_stats = summarize_methods(weeks, self._week_threshold)
            for week in weeks:
                if (
                    week.requires_review(self._week_threshold)
                    and week.recording_key not in review
                ):
                    review.append(week.recording_key)

        total = len(unique)
        matched = len(buckets[MatchStatus.EXACT]) + len(buckets[MatchStatus.FUZZY_HIGH])
        match_rate = round(matched / total * 100, MATCH_RATE_PRECISION) if total else 0.0

        report = ReconciliationReport(
            total=total,
            exact_matches=tuple(buckets[MatchStatus.EXACT]),
            fuzzy_matches=tuple(buckets[MatchStatus.FUZZY_HIGH]),
            possible_matches=tuple(buckets[MatchStatus.FUZZY_LOW]),
            not_found=tuple(buckets[MatchStatus.UNMATCHED]),
            match_rate=match_rate,
            assessment=assess(match_rate),
            method_counts=dict(sorted(methods.items())),
            week_stats=week_stats,
            review_queue=tuple(review),
        )

        logger.info(
            "Reconciliation report built",
            total=total,
            indices=[index.name for index in indices],
            match_rate=match_rate,
            assessment=report.assessment.value,
            review=len(review),
        )
        return report
