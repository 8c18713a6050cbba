"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from portfolio.api import router as api_router
from portfolio.core.config import get_settings
from portfolio.core.logging import get_logger
from portfolio.services.revalidation_scheduler import start_revalidation_scheduler

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the revalidation scheduler for the lifetime of the app."""
    scheduler_task = None
    if get_settings().ENABLE_REVALIDATION_SCHEDULER:
        scheduler_task = asyncio.create_task(start_revalidation_scheduler())

    yield

    if scheduler_task:
        scheduler_task.cancel()
        try:
            await scheduler_task
        except asyncio.CancelledError:
            logger.info("Revalidation scheduler stopped")


app = FastAPI(
    title="Portfolio CMS",
    description="Content API, admin CMS and assistant backend for a personal portfolio site",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "ok"}, status_code=200)


# Include v1 API router
app.include_router(api_router, prefix="/v1", tags=["v1"])
