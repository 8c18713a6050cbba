"""Health summary shown on the admin dashboard."""

from typing import Any

from portfolio.core.config import get_settings
from portfolio.core.logging import get_logger
from portfolio.db.dashboard import ping_database
from portfolio.db.vector_store import get_vector_stats
from portfolio.services.sync_service import get_sync_service

logger = get_logger(__name__)


def get_system_status() -> dict[str, Any]:
    """
    Database reachability, vector store size, integrations and queued writes.

    Each check degrades to an error entry instead of failing the whole report.
    """
    settings = get_settings()
    database = ping_database()

    vector_store: dict[str, Any]
    if database["connected"]:
        try:
            vector_store = {"available": True, **get_vector_stats()}
        except Exception as e:
            logger.warning(f"Vector store status unavailable: {e}")
            vector_store = {"available": False, "error": str(e)}
    else:
        vector_store = {"available": False, "error": "Database unreachable"}

    return {
        "database": database,
        "vector_store": vector_store,
        "integrations": {
            "openai": bool(settings.OPENAI_API_KEY),
            "github": bool(settings.GITHUB_TOKEN),
            "github_webhook": bool(settings.GITHUB_WEBHOOK_SECRET),
            "frontend_revalidation": bool(settings.FRONTEND_REVALIDATE_URL),
        },
        "sync_queue": {"pending": get_sync_service().pending_count()},
        "environment": settings.PORTFOLIO_ENV,
    }
