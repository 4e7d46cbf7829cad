"""Week inference module.

This module provides:
- WeekInferencer: confidence-weighted cascade of evidence tiers
- Tier strategy objects (timestamp, metadata, folder, pattern, relative, program)
- WeekCache: injected historical (student, coach, date) -> week lookup
- summarize_methods: method usage tallies returned as a value
"""

from recording_identity.weeks.cache import InMemoryWeekCache, WeekCache
from recording_identity.weeks.inferencer import WeekInferencer, infer_week
from recording_identity.weeks.schemas import (
    TierResult,
    WeekContext,
    WeekInferenceResult,
    WeekInferenceStats,
    WeekMethod,
    summarize_methods,
)

__all__ = [
    "InMemoryWeekCache",
    "TierResult",
    "WeekCache",
    "WeekContext",
    "WeekInferenceResult",
    "WeekInferenceStats",
    "WeekInferencer",
    "WeekMethod",
    "infer_week",
    "summarize_methods",
]
