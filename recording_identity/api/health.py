"""Health check endpoints for monitoring and orchestration."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from recording_identity.config import settings

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    timestamp: datetime
    version: str
    environment: str


class LivenessResponse(BaseModel):
    """Response model for liveness probe."""

    status: str


class ReadinessResponse(BaseModel):
    """Response model for readiness probe."""

    status: str
    checks: dict[str, str]


@router.get("/", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=settings.app_version,
        environment=settings.app_env,
    )


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe - app is running."""
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> ReadinessResponse:
    """Readiness probe - app can serve traffic.

    Checks:
    - API is responding
    - Ledger sink can authenticate (when configured)

    An unconfigured ledger does not block readiness; the engine
    endpoints work without it.
    """
    checks: dict[str, str] = {"api": "ok"}

    sink = getattr(request.app.state, "ledger_sink", None)
    if sink:
        try:
            checks["ledger"] = "ok" if await sink.health_check() else "failed"
        except Exception:
            checks["ledger"] = "failed"
    else:
        checks["ledger"] = "not_configured"

    status = "not_ready" if "failed" in checks.values() else "ready"
    return ReadinessResponse(status=status, checks=checks)
