"""Week inference API endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from recording_identity.models import Recording
from recording_identity.weeks import (
    WeekContext,
    WeekInferenceResult,
    WeekInferencer,
    WeekInferenceStats,
    summarize_methods,
)

router = APIRouter(prefix="/weeks", tags=["weeks"])


class InferWeeksRequest(BaseModel):
    """Recordings of one coach/student pair to place in their program."""

    recordings: list[Recording] = Field(description="Recordings to infer weeks for")
    program_start_date: date | None = Field(
        default=None, description="First day of week 1"
    )
    program_type: str | None = Field(
        default=None, description="Program calendar, e.g. academic_year"
    )
    coach_name: str | None = None
    student_name: str | None = None
    anchor_weeks: dict[str, int] = Field(
        default_factory=dict,
        description="Known weeks of other recordings, keyed by recording key",
    )
    use_siblings: bool = Field(
        default=True,
        description="Treat the submitted recordings as each other's siblings",
    )


class InferWeeksResponse(BaseModel):
    """Week assignments in request order."""

    results: list[WeekInferenceResult]
    stats: WeekInferenceStats


def get_week_inferencer(request: Request) -> WeekInferencer:
    """Dependency to get WeekInferencer from app state."""
    return request.app.state.week_inferencer


@router.post("/infer", response_model=InferWeeksResponse)
async def infer_weeks(
    request: InferWeeksRequest,
    inferencer: WeekInferencer = Depends(get_week_inferencer),
) -> InferWeeksResponse:
    """Infer the program week of each submitted recording.

    Args:
        request: Recordings plus the shared program context
        inferencer: Week inference cascade

    Returns:
        InferWeeksResponse with one result per recording
    """
    recordings = list(request.recordings)

    def siblings_of(_coach: str, _student: str) -> list[Recording]:
        return recordings

    context = WeekContext(
        program_start_date=request.program_start_date,
        coach_name=request.coach_name,
        student_name=request.student_name,
        siblings_of=siblings_of if request.use_siblings else None,
        anchor_weeks=dict(request.anchor_weeks),
        program_type=request.program_type,
    )
    results = inferencer.infer_all(recordings, lambda _recording: context)
    return InferWeeksResponse(results=results, stats=summarize_methods(results))
