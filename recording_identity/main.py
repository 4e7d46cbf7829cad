"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from recording_identity.adapters import SheetsAdapter
from recording_identity.api.router import api_router
from recording_identity.config import settings
from recording_identity.reconciliation import ReconciliationReportBuilder
from recording_identity.weeks import WeekInferencer

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper())
    ),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup:
    - Build the week inferencer and report builder from settings
    - Attach the ledger sink when Google credentials are configured
    """
    logger.info("Starting Recording Identity Engine...")

    app.state.week_inferencer = WeekInferencer(scale=settings.week_confidence)
    app.state.report_builder = ReconciliationReportBuilder(
        week_review_threshold=settings.week_review_threshold
    )
    logger.info("Inference engines initialized")

    if settings.google_credentials_path:
        app.state.ledger_sink = SheetsAdapter(settings.google_credentials_path)
        logger.info("Ledger sink configured")
    else:
        app.state.ledger_sink = None

    yield

    logger.info("Shutting down Recording Identity Engine...")


app = FastAPI(
    title=settings.app_name,
    description="Recording identity resolution and program week inference",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "recording_identity.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
