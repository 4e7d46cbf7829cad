"""Reconciliation report API endpoints."""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from recording_identity.identity import TargetIndex
from recording_identity.models import Recording
from recording_identity.reconciliation import (
    ReconciliationReport,
    ReconciliationReportBuilder,
)
from recording_identity.weeks import WeekInferenceResult

router = APIRouter(prefix="/reconciliation", tags=["reconciliation"])


class TargetCorpus(BaseModel):
    """One corpus to reconcile against."""

    name: str = Field(description="Label used in the report, e.g. a sheet tab")
    records: list[Recording]


class ReportRequest(BaseModel):
    """Request to account for query records in one or more corpora."""

    queries: list[Recording] = Field(description="Records to account for")
    targets: list[TargetCorpus] = Field(
        min_length=1, description="Corpora in tie-break order"
    )
    week_results: list[WeekInferenceResult] | None = Field(
        default=None, description="Optional week inferences to tally and review"
    )


def get_report_builder(request: Request) -> ReconciliationReportBuilder:
    """Dependency to get ReconciliationReportBuilder from app state."""
    return request.app.state.report_builder


@router.post("/report", response_model=ReconciliationReport)
async def build_report(
    request: ReportRequest,
    builder: ReconciliationReportBuilder = Depends(get_report_builder),
) -> ReconciliationReport:
    """Reconcile query records against the submitted corpora.

    Each corpus is indexed once, then every query goes through the
    matching cascade against all indices.

    Args:
        request: Queries, target corpora, optional week inferences
        builder: Report builder

    Returns:
        ReconciliationReport
    """
    indices = [
        TargetIndex.build(target.records, name=target.name) for target in request.targets
    ]
    return builder.build(request.queries, indices, request.week_results)
