"""Database error normalisation, retry and validation helpers."""

import random
import time
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from portfolio.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Postgres / PostgREST codes that are worth retrying
RETRYABLE_CODES = {"57014", "57P03"}
RETRYABLE_MARKERS = ("network", "timeout", "connection")


class DatabaseError(Exception):
    """Database operation failure carrying an HTTP-friendly status code."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        context: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.context = context or {}
        self.original_error = original_error

    @property
    def is_unavailable(self) -> bool:
        """True when the backend could not be reached at all."""
        return self.status_code == 503


def _error_code(error: Any) -> str | None:
    code = getattr(error, "code", None)
    if code is None and isinstance(error, dict):
        code = error.get("code")
    return str(code) if code is not None else None


def _error_message(error: Any) -> str:
    message = getattr(error, "message", None)
    if message is None and isinstance(error, dict):
        message = error.get("message")
    return str(message if message is not None else error)


def handle_database_error(
    error: Any,
    operation: str,
    entity: str,
    context: dict[str, Any] | None = None,
) -> DatabaseError:
    """
    Convert a raw client error into a DatabaseError.

    Args:
        error: Exception (or error payload) raised by the database client
        operation: Verb describing the attempted operation ("fetch", "create", ...)
        entity: Human readable entity name
        context: Optional context for logs

    Returns:
        DatabaseError with a status code derived from the Postgres error code
    """
    if isinstance(error, DatabaseError):
        return error

    logger.error(
        f"Database error during {operation} on {entity}: {error}",
        extra={"extra_data": {"context": context or {}}},
    )

    status_code = 500
    message = f"Failed to {operation} {entity}"

    code = _error_code(error)
    if code == "23505":
        status_code = 409
        message = f"{entity} already exists"
    elif code == "23503":
        status_code = 400
        message = f"Referenced {entity} does not exist"
    elif code == "42P01":
        message = f"Database schema error: table for {entity} not found"
    elif code == "42703":
        message = f"Database schema error: column in {entity} not found"
    elif code in ("28P01", "28000"):
        status_code = 401
        message = "Database authentication failed"
    elif code in ("57014", "57P01", "57P02", "57P03"):
        status_code = 503
        message = "Database temporarily unavailable"

    text = _error_message(error).lower()
    if any(marker in text for marker in ("network", "fetch", "connection")):
        status_code = 503
        message = "Database connection failed"

    return DatabaseError(message, status_code, context, error if isinstance(error, Exception) else None)


def is_retryable(error: Any) -> bool:
    """Only connection problems and timeouts are retried."""
    if isinstance(error, DatabaseError):
        if error.original_error is not None:
            return is_retryable(error.original_error)
        return error.is_unavailable

    if _error_code(error) in RETRYABLE_CODES:
        return True

    text = _error_message(error).lower()
    return any(marker in text for marker in RETRYABLE_MARKERS)


def retry_operation(
    operation: Callable[[], T],
    max_retries: int | None = None,
    initial_delay: float | None = None,
) -> T:
    """
    Run a database operation, retrying transient failures with backoff.

    Delay for attempt n is initial_delay * 2**n scaled by a jitter factor in
    [0.5, 1.0). Non-retryable errors propagate immediately.

    Args:
        operation: Zero-argument callable performing the work
        max_retries: Total attempts (defaults to DB_MAX_RETRIES)
        initial_delay: First backoff delay in seconds (defaults to DB_RETRY_INITIAL_DELAY)

    Returns:
        Whatever the operation returns

    Raises:
        The last error raised by the operation
    """
    if max_retries is None or initial_delay is None:
        from portfolio.core.config import get_settings

        settings = get_settings()
        if max_retries is None:
            max_retries = settings.DB_MAX_RETRIES
        if initial_delay is None:
            initial_delay = settings.DB_RETRY_INITIAL_DELAY

    max_retries = max(1, max_retries)
    last_error: Exception | None = None

    for attempt in range(max_retries):
        try:
            return operation()
        except Exception as e:
            last_error = e
            if not is_retryable(e):
                raise

            if attempt == max_retries - 1:
                break

            delay = initial_delay * (2**attempt) * (0.5 + random.random() * 0.5)
            logger.warning(
                f"Retrying database operation after {delay:.3f}s "
                f"(attempt {attempt + 1}/{max_retries}): {e}"
            )
            time.sleep(delay)

    assert last_error is not None
    raise last_error


def validate_required_fields(
    data: dict[str, Any],
    required_fields: Iterable[str],
    entity_name: str,
) -> None:
    """
    Ensure all required fields are present and not None.

    Raises:
        DatabaseError: 400 listing the missing fields
    """
    missing = [field for field in required_fields if data.get(field) is None]

    if missing:
        raise DatabaseError(
            f"Missing required fields for {entity_name}: {', '.join(missing)}",
            400,
            {"provided_fields": sorted(data.keys()), "missing_fields": missing},
        )
