"""Supabase client initialization."""

from collections.abc import Callable
from functools import lru_cache
from typing import Any

from supabase import Client, create_client

from portfolio.core.config import get_settings
from portfolio.core.errors import handle_database_error, retry_operation


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Get Supabase client instance (cached singleton).

    Returns:
        Supabase client configured with service role key

    Raises:
        RuntimeError: If client initialization fails
    """
    try:
        settings = get_settings()
        client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        return client
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e


def execute_query(
    build: Callable[[], Any],
    operation: str,
    entity: str,
    context: dict[str, Any] | None = None,
) -> Any:
    """
    Execute a query builder with retries and error normalisation.

    Args:
        build: Zero-argument callable returning a query ready for execute()
        operation: Verb used in error messages ("fetch", "create", ...)
        entity: Entity name used in error messages
        context: Extra context for logs

    Returns:
        The client response

    Raises:
        DatabaseError: When the query fails (after retries for transient errors)
    """

    def _run() -> Any:
        try:
            return build().execute()
        except Exception as e:
            raise handle_database_error(e, operation, entity, context) from e

    return retry_operation(_run)
