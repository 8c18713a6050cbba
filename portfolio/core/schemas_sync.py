"""Pydantic schemas for the offline sync queue."""

from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from portfolio.core.dates import utc_now_iso

SyncAction = Literal["create", "update", "delete"]
SyncStatus = Literal["idle", "syncing", "success", "error"]


class SyncQueueItem(BaseModel):
    """A pending admin write waiting for the database."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    timestamp: str = Field(default_factory=utc_now_iso)
    action: SyncAction
    resource: str = Field(..., description="Admin content slug the write targets")
    data: dict[str, Any] = Field(default_factory=dict)
    processed: bool = False
    retry_count: int = 0
    error: str | None = None


class SyncState(BaseModel):
    last_sync_time: str | None = None
    status: SyncStatus = "idle"
    pending_actions: int = 0
    error: str | None = None


class SyncResourceResult(BaseModel):
    data: Any = None
    from_cache: bool
    synced: bool
