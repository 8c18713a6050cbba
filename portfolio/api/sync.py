"""Admin API endpoints for the offline write queue."""

import asyncio
from typing import Any

from fastapi import APIRouter, Depends

from portfolio.core.auth_middleware import AuthContext, require_admin
from portfolio.core.logging import get_logger
from portfolio.core.schemas_sync import SyncQueueItem, SyncState
from portfolio.services.sync_service import get_sync_service

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/sync")


@router.get("/state", response_model=SyncState)
async def get_state(auth: AuthContext = Depends(require_admin)) -> SyncState:
    return get_sync_service().get_state()


@router.get("/queue", response_model=list[SyncQueueItem])
async def get_queue(auth: AuthContext = Depends(require_admin)) -> list[SyncQueueItem]:
    return get_sync_service().get_queue()


@router.post("/process")
async def process_queue(auth: AuthContext = Depends(require_admin)) -> dict[str, Any]:
    """Replay queued writes now instead of waiting for the scheduler."""
    service = get_sync_service()
    success = await asyncio.to_thread(service.process_queue)
    logger.info(f"Manual sync by {auth.display_name}: {'ok' if success else 'with errors'}")
    return {
        "success": success,
        "state": service.get_state().model_dump(),
        "pending": service.pending_count(),
    }


@router.delete("/queue")
async def clear_queue(auth: AuthContext = Depends(require_admin)) -> dict[str, Any]:
    get_sync_service().clear_queue()
    logger.info(f"Sync queue cleared by {auth.display_name}")
    return {"success": True}
