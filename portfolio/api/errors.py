"""Translate service failures into HTTP errors."""

from fastapi import HTTPException

from portfolio.core.errors import DatabaseError
from portfolio.core.logging import get_logger

logger = get_logger(__name__)


def http_error(error: Exception, detail: str) -> HTTPException:
    """
    Map an unexpected failure to an HTTPException.

    DatabaseError keeps its status code and message. Anything else is logged
    with its traceback and reported as a generic 500.
    """
    if isinstance(error, DatabaseError):
        logger.warning(f"{detail}: {error.message}")
        return HTTPException(status_code=error.status_code, detail=error.message)

    logger.exception(detail)
    return HTTPException(status_code=500, detail=detail)
