"""Sync queue for admin writes made while the database was unavailable.

Queued writes are replayed in order through a handler (by default the admin
content writers). An item that keeps failing is given up after
SYNC_MAX_RETRIES attempts so it cannot block the queue forever.
"""

import threading
from collections.abc import Callable
from functools import lru_cache
from typing import Any

from portfolio.core.config import get_settings
from portfolio.core.dates import utc_now_iso
from portfolio.core.logging import get_logger
from portfolio.core.schemas_sync import SyncAction, SyncQueueItem, SyncResourceResult, SyncState
from portfolio.services.offline_storage import OfflineStore, get_offline_store

logger = get_logger(__name__)

SYNC_QUEUE_KEY = "sync_queue"
SYNC_STATE_KEY = "sync_state"
DATA_VERSION_KEY_PREFIX = "data_version_"
RESOURCE_KEY_PREFIX = "resource_"

QueueHandler = Callable[[SyncQueueItem], Any]


def apply_queued_write(item: SyncQueueItem) -> Any:
    """Default handler: replay the write through the admin content writers."""
    from portfolio.db.content import apply_write

    return apply_write(item.action, item.resource, item.data)


class SyncService:
    """Durable write queue plus sync state, stored in an OfflineStore."""

    def __init__(
        self,
        store: OfflineStore,
        handler: QueueHandler = apply_queued_write,
        max_retries: int = 3,
    ):
        self.store = store
        self.handler = handler
        self.max_retries = max_retries
        self._process_lock = threading.Lock()

    # Queue

    def get_queue(self) -> list[SyncQueueItem]:
        raw = self.store.get(SYNC_QUEUE_KEY, [])
        if not isinstance(raw, list):
            return []
        items = []
        for entry in raw:
            try:
                items.append(SyncQueueItem.model_validate(entry))
            except ValueError as e:
                logger.warning(f"Dropping malformed sync queue entry: {e}")
        return items

    def _save_queue(self, queue: list[SyncQueueItem]) -> None:
        self.store.set(SYNC_QUEUE_KEY, [item.model_dump() for item in queue])
        self.update_state(pending_actions=sum(1 for item in queue if not item.processed))

    def enqueue(self, action: SyncAction, resource: str, data: dict[str, Any]) -> SyncQueueItem:
        item = SyncQueueItem(action=action, resource=resource, data=data)
        with self.store.lock:
            queue = self.get_queue()
            queue.append(item)
            self._save_queue(queue)
        logger.info(f"Queued {action} on {resource} ({item.id})")
        return item

    def clear_queue(self) -> None:
        with self.store.lock:
            self.store.set(SYNC_QUEUE_KEY, [])
            self.update_state(pending_actions=0)

    def pending_count(self) -> int:
        return sum(1 for item in self.get_queue() if not item.processed)

    # State

    def get_state(self) -> SyncState:
        raw = self.store.get(SYNC_STATE_KEY)
        if not isinstance(raw, dict):
            return SyncState()
        try:
            return SyncState.model_validate(raw)
        except ValueError:
            return SyncState()

    def update_state(self, **changes: Any) -> SyncState:
        with self.store.lock:
            state = self.get_state().model_copy(update=changes)
            self.store.set(SYNC_STATE_KEY, state.model_dump())
        return state

    # Data versions

    def get_data_version(self, resource: str) -> int:
        version = self.store.get(f"{DATA_VERSION_KEY_PREFIX}{resource}", 0)
        return version if isinstance(version, int) else 0

    def set_data_version(self, resource: str, version: int) -> None:
        self.store.set(f"{DATA_VERSION_KEY_PREFIX}{resource}", version)

    # Processing

    def process_queue(self) -> bool:
        """
        Replay unprocessed items in order.

        Returns:
            True when every attempted item succeeded (or there was nothing to do)
        """
        with self._process_lock:
            pending = [item for item in self.get_queue() if not item.processed]
            if not pending:
                return True

            self.update_state(status="syncing", error=None)
            success = True
            last_error: str | None = None

            for item in pending:
                try:
                    self.handler(item)
                    item.processed = True
                    item.error = None
                except Exception as e:
                    success = False
                    last_error = str(e) or type(e).__name__
                    item.retry_count += 1
                    item.error = last_error
                    if item.retry_count >= self.max_retries:
                        item.processed = True
                        logger.error(
                            f"Giving up on queued {item.action} for {item.resource} "
                            f"after {item.retry_count} attempts: {last_error}"
                        )
                    else:
                        logger.warning(f"Queued {item.action} for {item.resource} failed: {last_error}")

            results = {item.id: item for item in pending}
            with self.store.lock:
                # Items enqueued while processing keep their place
                queue = [results.get(item.id, item) for item in self.get_queue()]
                self._save_queue(queue)
                self.update_state(
                    status="success" if success else "error",
                    last_sync_time=utc_now_iso(),
                    error=last_error,
                )

            return success

    # Resource snapshots

    def _refresh(self, resource: str, fetch_fn: Callable[[], Any]) -> Any:
        data = fetch_fn()
        with self.store.lock:
            self.store.set(f"{RESOURCE_KEY_PREFIX}{resource}", data)
            self.set_data_version(resource, self.get_data_version(resource) + 1)
        return data

    def _refresh_in_background(self, resource: str, fetch_fn: Callable[[], Any]) -> threading.Thread:
        def _run() -> None:
            try:
                self._refresh(resource, fetch_fn)
                self.update_state(last_sync_time=utc_now_iso())
            except Exception:
                logger.exception(f"Background sync failed for {resource}")

        thread = threading.Thread(target=_run, name=f"sync-{resource}", daemon=True)
        thread.start()
        return thread

    def synchronize_resource(
        self,
        resource: str,
        fetch_fn: Callable[[], Any],
        force: bool = False,
    ) -> SyncResourceResult:
        """
        Return a resource snapshot, refreshing it from its source.

        With a cached snapshot and no force, the cache is returned at once and
        refreshed in a background thread. Otherwise the source is fetched, the
        snapshot and its version updated and the write queue drained. A failed
        fetch falls back to the cache when there is one.
        """
        cached = self.store.get(f"{RESOURCE_KEY_PREFIX}{resource}")

        if cached is not None and not force:
            self._refresh_in_background(resource, fetch_fn)
            return SyncResourceResult(data=cached, from_cache=True, synced=False)

        self.update_state(status="syncing")
        try:
            fresh = self._refresh(resource, fetch_fn)
            self.process_queue()
        except Exception as e:
            self.update_state(status="error", error=str(e))
            if cached is not None:
                logger.warning(f"Sync of {resource} failed, serving cached data: {e}")
                return SyncResourceResult(data=cached, from_cache=True, synced=False)
            raise

        self.update_state(status="success", last_sync_time=utc_now_iso(), error=None)
        return SyncResourceResult(data=fresh, from_cache=False, synced=True)


@lru_cache(maxsize=1)
def get_sync_service() -> SyncService:
    return SyncService(get_offline_store(), max_retries=get_settings().SYNC_MAX_RETRIES)
