"""In-memory token bucket rate limiting for public endpoints."""

import threading
import time
from functools import lru_cache
from typing import Any

from fastapi import HTTPException, Request

from portfolio.core.config import get_settings
from portfolio.core.logging import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Token bucket rate limiter keyed by client.

    Each key holds up to burst_size tokens and regains requests_per_minute
    tokens per minute. State is per-process.
    """

    def __init__(self, requests_per_minute: int = 10, burst_size: int | None = None, name: str = "default"):
        self.name = name
        self.requests_per_minute = requests_per_minute
        self.burst_size = burst_size if burst_size is not None else requests_per_minute
        self.refill_rate = requests_per_minute / 60.0  # tokens per second

        # key -> (tokens, last_refill_time)
        self._buckets: dict[str, tuple[float, float]] = {}
        self._request_counts: dict[str, int] = {}
        self._lock = threading.Lock()

    def _refill(self, key: str, now: float) -> float:
        tokens, last_refill = self._buckets.get(key, (float(self.burst_size), now))
        tokens = min(float(self.burst_size), tokens + (now - last_refill) * self.refill_rate)
        self._buckets[key] = (tokens, now)
        return tokens

    def check_limit(self, key: str, cost: float = 1.0) -> bool:
        """
        Consume tokens for a request.

        Returns:
            True if allowed

        Raises:
            HTTPException: 429 with Retry-After when the bucket is empty
        """
        with self._lock:
            now = time.monotonic()
            tokens = self._refill(key, now)

            if tokens >= cost:
                self._buckets[key] = (tokens - cost, now)
                self._request_counts[key] = self._request_counts.get(key, 0) + 1
                return True

            retry_after = int((cost - tokens) / self.refill_rate) + 1 if self.refill_rate else 60

        logger.warning(
            f"Rate limit exceeded for {self.name}:{key}, "
            f"tokens: {tokens:.2f}/{self.burst_size}, retry after: {retry_after}s"
        )
        raise HTTPException(
            status_code=429,
            detail=f"Rate limit exceeded. Try again in {retry_after} seconds.",
            headers={"Retry-After": str(retry_after)},
        )

    def get_stats(self, key: str) -> dict[str, Any]:
        with self._lock:
            tokens = self._refill(key, time.monotonic())
            return {
                "tokens_remaining": int(tokens),
                "burst_size": self.burst_size,
                "requests_per_minute": self.requests_per_minute,
                "total_requests": self._request_counts.get(key, 0),
            }

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key when none is given."""
        with self._lock:
            if key is None:
                self._buckets.clear()
                self._request_counts.clear()
            else:
                self._buckets.pop(key, None)
                self._request_counts.pop(key, None)


def client_key(request: Request) -> str:
    """Identify the caller by forwarded IP, falling back to the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


@lru_cache
def get_contact_rate_limiter() -> RateLimiter:
    settings = get_settings()
    return RateLimiter(requests_per_minute=settings.CONTACT_RATE_LIMIT_PER_MINUTE, name="contact")


@lru_cache
def get_rag_rate_limiter() -> RateLimiter:
    settings = get_settings()
    return RateLimiter(requests_per_minute=settings.RAG_RATE_LIMIT_PER_MINUTE, name="rag")


def check_contact_rate_limit(request: Request) -> None:
    """FastAPI dependency guarding the contact form."""
    get_contact_rate_limiter().check_limit(client_key(request))


def check_rag_rate_limit(request: Request) -> None:
    """FastAPI dependency guarding the assistant endpoint."""
    get_rag_rate_limiter().check_limit(client_key(request))
