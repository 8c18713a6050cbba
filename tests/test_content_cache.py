"""Tests for the per-content-type cache."""

from unittest.mock import MagicMock

import pytest

from portfolio.core.content_cache import ContentCache
from portfolio.core.content_types import ContentType


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_get_or_load_caches_value():
    cache = ContentCache(ttl_seconds=60, clock=Clock())
    loader = MagicMock(return_value=["a"])

    assert cache.get_or_load(ContentType.SKILLS, ("all",), loader) == ["a"]
    assert cache.get_or_load(ContentType.SKILLS, ("all",), loader) == ["a"]

    loader.assert_called_once()
    assert cache.hits == 1
    assert cache.misses == 1


def test_entries_expire_after_ttl():
    clock = Clock()
    cache = ContentCache(ttl_seconds=60, clock=clock)
    loader = MagicMock(side_effect=["old", "new"])

    cache.get_or_load(ContentType.BLOG, "k", loader)
    clock.now = 61
    assert cache.get_or_load(ContentType.BLOG, "k", loader) == "new"


def test_loader_failure_is_not_cached():
    cache = ContentCache()
    loader = MagicMock(side_effect=[RuntimeError("down"), "ok"])

    with pytest.raises(RuntimeError):
        cache.get_or_load(ContentType.PROJECTS, "k", loader)
    assert cache.get_or_load(ContentType.PROJECTS, "k", loader) == "ok"


def test_invalidate_one_type():
    cache = ContentCache()
    cache.set(ContentType.SKILLS, "a", 1)
    cache.set(ContentType.SKILLS, "b", 2)
    cache.set(ContentType.BLOG, "a", 3)

    assert cache.invalidate(ContentType.SKILLS) == 2
    assert cache.get(ContentType.SKILLS, "a") == (False, None)
    assert cache.get(ContentType.BLOG, "a") == (True, 3)


def test_invalidate_all():
    cache = ContentCache()
    cache.set(ContentType.SKILLS, "a", 1)
    cache.set(ContentType.TIMELINE, "a", 2)

    assert cache.invalidate(ContentType.ALL) == 2
    assert cache.size() == 0


def test_none_results_are_not_cached():
    cache = ContentCache()
    loader = MagicMock(side_effect=[None, {"id": 1}])

    assert cache.get_or_load(ContentType.PROJECTS, ("slug", "late"), loader) is None
    assert cache.size() == 0
    assert cache.get_or_load(ContentType.PROJECTS, ("slug", "late"), loader) == {"id": 1}


def test_oldest_entries_are_evicted_past_max_entries():
    cache = ContentCache(max_entries=3, clock=Clock())
    for i in range(5):
        cache.set(ContentType.BLOG, ("page", i), i)

    assert cache.size() == 3
    assert cache.evictions == 2
    assert cache.get(ContentType.BLOG, ("page", 0)) == (False, None)
    assert cache.get(ContentType.BLOG, ("page", 4)) == (True, 4)


def test_rewriting_a_key_refreshes_its_position():
    cache = ContentCache(max_entries=2, clock=Clock())
    cache.set(ContentType.SKILLS, "a", 1)
    cache.set(ContentType.SKILLS, "b", 2)
    cache.set(ContentType.SKILLS, "a", 3)
    cache.set(ContentType.SKILLS, "c", 4)

    assert cache.get(ContentType.SKILLS, "a") == (True, 3)
    assert cache.get(ContentType.SKILLS, "b") == (False, None)


def test_expired_entries_are_swept_on_write():
    clock = Clock()
    cache = ContentCache(ttl_seconds=10, max_entries=100, clock=clock)
    cache.set(ContentType.BLOG, "old", 1)
    clock.now = 11
    cache.set(ContentType.BLOG, "new", 2)

    assert cache.size() == 1
