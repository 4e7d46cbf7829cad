"""API router aggregation."""

from fastapi import APIRouter

from recording_identity.api.health import router as health_router
from recording_identity.api.reconciliation import router as reconciliation_router
from recording_identity.api.weeks import router as weeks_router

api_router = APIRouter()
api_router.include_router(health_router)
# Week inference endpoints
api_router.include_router(weeks_router)
# Cross-source reconciliation endpoints
api_router.include_router(reconciliation_router)
