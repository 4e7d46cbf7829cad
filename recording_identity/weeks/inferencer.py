"""WeekInferencer drives the week inference cascade.

Cascade (per recording):
1. Primary tiers, all executed: timestamp, metadata, folder name, pattern
   fallback. Highest confidence wins; ties go to the earlier tier.
2. Secondary tiers, only if every primary tier came back empty:
   relative positioning, program-type default.
3. Absolute fallback: week 1 at confidence 10.

The cascade never raises. Tier exceptions are logged and kept as evidence.
"""

from collections.abc import Callable, Iterable, Sequence

import structlog

from recording_identity.config import WeekConfidenceScale, get_settings
from recording_identity.models import Recording
from recording_identity.weeks.schemas import (
    DEFAULT_FALLBACK_CONFIDENCE,
    TierResult,
    WeekContext,
    WeekInferenceResult,
    WeekMethod,
)
from recording_identity.weeks.tiers import (
    FolderNameTier,
    MetadataTier,
    PatternTier,
    ProgramDefaultTier,
    RelativePositionTier,
    TimestampTier,
    WeekTier,
)

logger = structlog.get_logger()

ResultCacheKey = tuple[str, str]


def default_primary_tiers(scale: WeekConfidenceScale) -> list[WeekTier]:
    """Direct-evidence tiers in tie-break order."""
    return [TimestampTier(), MetadataTier(scale), FolderNameTier(), PatternTier(scale)]


def default_secondary_tiers() -> list[WeekTier]:
    """Tiers consulted only when no direct evidence exists."""
    return [RelativePositionTier(), ProgramDefaultTier()]


class WeekInferencer:
    """Infers the program week of a recording from independent evidence.

    Stateless apart from an optional result cache keyed by
    ``(recording.key, context.version)``; a cache hit returns the same
    value a fresh computation would.
    """

    def __init__(
        self,
        scale: WeekConfidenceScale | None = None,
        primary_tiers: Sequence[WeekTier] | None = None,
        secondary_tiers: Sequence[WeekTier] | None = None,
        result_cache: dict[ResultCacheKey, WeekInferenceResult] | None = None,
    ):
        """Initialize inferencer.

        Args:
            scale: Confidence constants for pattern tiers. Defaults to settings.
            primary_tiers: Override the direct-evidence tier list.
            secondary_tiers: Override the relative/default tier list.
            result_cache: Optional dict used to memoize results.
        """
        scale = scale or get_settings().week_confidence
        self._primary = list(primary_tiers or default_primary_tiers(scale))
        self._secondary = list(
            secondary_tiers if secondary_tiers is not None else default_secondary_tiers()
        )
        self._results = result_cache

    def infer_week(
        self, recording: Recording, context: WeekContext | None = None
    ) -> WeekInferenceResult:
        """Infer the week of a recording.

        Args:
            recording: Recording to place in the program
            context: Program start, names, siblings, cache. Empty if omitted.

        Returns:
            WeekInferenceResult; at worst the week-1 default fallback
        """
        context = context or WeekContext()
        cache_key = (recording.key, context.version)
        if self._results is not None and cache_key in self._results:
            return self._results[cache_key]

        notes: list[str] = []
        best = self._run_stage(self._primary, recording, context, notes)
        if best is None:
            best = self._run_stage(self._secondary, recording, context, notes)

        if best is None:
            result = WeekInferenceResult(
                recording_key=recording.key,
                week_number=1,
                confidence=DEFAULT_FALLBACK_CONFIDENCE,
                method=WeekMethod.DEFAULT_FALLBACK,
                evidence=(
                    "No week information found, defaulting to week 1",
                    *notes,
                ),
            )
        else:
            result = WeekInferenceResult(
                recording_key=recording.key,
                week_number=best.week,
                confidence=best.confidence,
                method=best.method,
                evidence=(*best.evidence, *notes),
            )

        logger.debug(
            "Week inferred",
            recording_key=recording.key,
            week_number=result.week_number,
            confidence=result.confidence,
            method=result.method.value,
        )

        if self._results is not None:
            self._results[cache_key] = result
        return result

    def infer_all(
        self,
        recordings: Iterable[Recording],
        context_for: Callable[[Recording], WeekContext] | None = None,
    ) -> list[WeekInferenceResult]:
        """Infer weeks for many recordings, in input order.

        Args:
            recordings: Recordings to process
            context_for: Builds the context of each recording

        Returns:
            List of results in same order as recordings
        """
        return [
            self.infer_week(r, context_for(r) if context_for else None)
            for r in recordings
        ]

    @staticmethod
    def _run_stage(
        tiers: Sequence[WeekTier],
        recording: Recording,
        context: WeekContext,
        notes: list[str],
    ) -> TierResult | None:
        best: TierResult | None = None
        for tier in tiers:
            try:
                outcome = tier.attempt(recording, context)
            except Exception as e:
                logger.warning(
                    "Week tier failed",
                    tier=tier.method.value,
                    recording_key=recording.key,
                    error=str(e),
                )
                notes.append(f"{tier.method.value} error: {e}")
                continue

            if outcome.week is None:
                notes.extend(outcome.evidence)
                continue
            # Strictly greater keeps the earlier tier on ties
            if best is None or outcome.confidence > best.confidence:
                best = outcome
        return best


def infer_week(
    recording: Recording, context: WeekContext | None = None
) -> WeekInferenceResult:
    """Infer a recording's week with the default tier configuration."""
    return WeekInferencer().infer_week(recording, context)
