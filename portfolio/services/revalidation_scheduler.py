"""Background scheduler that revalidates due content and drains the sync queue."""

import asyncio

from portfolio.core.config import get_settings
from portfolio.core.logging import get_logger
from portfolio.services.revalidation_service import revalidate_due
from portfolio.services.sync_service import get_sync_service

logger = get_logger(__name__)


async def start_revalidation_scheduler() -> None:
    """Long-running coroutine that runs a cycle every REVALIDATION_POLL_SECONDS."""
    interval = get_settings().REVALIDATION_POLL_SECONDS
    logger.info("[revalidation_scheduler] Starting background revalidation scheduler")
    while True:
        try:
            await run_cycle()
        except Exception:
            logger.exception("[revalidation_scheduler] Error in revalidation cycle")
        await asyncio.sleep(interval)


async def run_cycle() -> None:
    """Revalidate due content types, then replay any queued writes."""
    results = await revalidate_due()
    if results:
        logger.info(
            "[revalidation_scheduler] Revalidated "
            + ", ".join(result.content_type for result in results)
        )

    sync = get_sync_service()
    if sync.pending_count():
        ok = await asyncio.to_thread(sync.process_queue)
        if not ok:
            logger.warning("[revalidation_scheduler] Some queued writes failed to replay")
