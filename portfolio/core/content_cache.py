"""Process-local cache of public content, invalidated by revalidation."""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from functools import lru_cache
from typing import Any, TypeVar

from portfolio.core.config import get_settings
from portfolio.core.content_types import ContentType, expand
from portfolio.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ContentCache:
    """
    TTL cache partitioned by content type.

    Entries live until their TTL expires, their content type is revalidated,
    or they are the oldest entry when max_entries is exceeded. Loader
    failures and None results are not cached.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[tuple[ContentType, Hashable], tuple[float, Any]] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, content_type: ContentType, key: Hashable) -> tuple[bool, Any]:
        with self._lock:
            entry = self._entries.get((content_type, key))
            if entry is None:
                return False, None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[(content_type, key)]
                return False, None
            return True, value

    def set(self, content_type: ContentType, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries.pop((content_type, key), None)
            self._entries[(content_type, key)] = (self._clock() + self.ttl_seconds, value)
            self._evict_locked()

    def _evict_locked(self) -> None:
        now = self._clock()
        expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
        for k in expired:
            del self._entries[k]
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            self.evictions += 1

    def get_or_load(self, content_type: ContentType, key: Hashable, loader: Callable[[], T]) -> T:
        """Return the cached value or call loader and cache what it returns (unless None)."""
        found, value = self.get(content_type, key)
        if found:
            self.hits += 1
            return value

        self.misses += 1
        value = loader()
        if value is not None:
            self.set(content_type, key, value)
        return value

    def invalidate(self, content_type: ContentType) -> int:
        """Drop every entry of a content type (ALL drops everything)."""
        types = set(expand(content_type))
        with self._lock:
            stale = [k for k in self._entries if k[0] in types]
            for k in stale:
                del self._entries[k]
        logger.debug(f"Invalidated {len(stale)} cached entries", extra={"content_type": content_type.value})
        return len(stale)

    def size(self) -> int:
        with self._lock:
            return len(self._entries)


@lru_cache(maxsize=1)
def get_content_cache() -> ContentCache:
    """Shared cache instance for the running process."""
    settings = get_settings()
    return ContentCache(
        ttl_seconds=settings.CONTENT_CACHE_TTL_SECONDS,
        max_entries=settings.CONTENT_CACHE_MAX_ENTRIES,
    )
