"""Tests for revalidation side effects and settings persistence."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from portfolio.core.content_cache import get_content_cache
from portfolio.core.content_types import ContentType
from portfolio.core.errors import DatabaseError
from portfolio.core.schemas_revalidation import RevalidationSettings
from portfolio.db.revalidation_settings import get_revalidation_settings, save_revalidation_settings
from portfolio.services import revalidation_service


@pytest.mark.asyncio
async def test_revalidate_clears_cache_and_stamps(fake_supabase):
    cache = get_content_cache()
    cache.set(ContentType.SKILLS, ("all",), ["python"])
    cache.set(ContentType.BLOG, ("posts",), [])

    with patch.object(revalidation_service, "notify_frontend", new_callable=AsyncMock) as mock_notify:
        mock_notify.return_value = True
        result = await revalidation_service.revalidate(ContentType.SKILLS)

    assert result.revalidated
    assert result.content_type == "skills"
    assert result.paths == ["/api/skills", "/"]
    assert result.frontend_notified
    assert result.cache_entries_cleared == 1
    assert cache.get(ContentType.BLOG, ("posts",))[0]

    stored = fake_supabase.tables["revalidation_settings"][0]
    assert stored["id"] == 1
    assert stored["last_revalidated"]["skills"] == result.timestamp
    assert stored["last_revalidated"]["blog"] is None


@pytest.mark.asyncio
async def test_revalidate_survives_settings_failure(fake_supabase):
    fake_supabase.fail("revalidation_settings", Exception("permission denied"))

    with patch.object(revalidation_service, "notify_frontend", new_callable=AsyncMock, return_value=False):
        result = await revalidation_service.revalidate(ContentType.ALL)

    assert result.revalidated
    assert not result.frontend_notified


@pytest.mark.asyncio
async def test_revalidate_due_only_runs_due_types(fake_supabase):
    with patch.object(revalidation_service, "notify_frontend", new_callable=AsyncMock, return_value=False):
        first = await revalidation_service.revalidate_due()
        second = await revalidation_service.revalidate_due()

    assert [r.content_type for r in first] == ["all"]
    assert second == []


@pytest.mark.asyncio
async def test_notify_frontend_without_url_is_skipped(monkeypatch):
    monkeypatch.delenv("FRONTEND_REVALIDATE_URL", raising=False)
    assert await revalidation_service.notify_frontend(["/"]) is False


@pytest.mark.asyncio
async def test_notify_frontend_posts_paths(monkeypatch):
    monkeypatch.setenv("FRONTEND_REVALIDATE_URL", "https://site.test/api/revalidate")

    with patch("portfolio.services.revalidation_service.httpx.AsyncClient") as MockClient:
        client_instance = AsyncMock()
        client_instance.post.return_value = MagicMock(raise_for_status=MagicMock())
        MockClient.return_value.__aenter__ = AsyncMock(return_value=client_instance)
        MockClient.return_value.__aexit__ = AsyncMock(return_value=None)

        assert await revalidation_service.notify_frontend(["/blog"]) is True

    call = client_instance.post.call_args
    assert call.args[0] == "https://site.test/api/revalidate"
    assert call.kwargs["json"] == {"paths": ["/blog"], "secret": "test-revalidation-secret"}


@pytest.mark.asyncio
async def test_notify_frontend_failure_returns_false(monkeypatch):
    monkeypatch.setenv("FRONTEND_REVALIDATE_URL", "https://site.test/api/revalidate")

    with patch("portfolio.services.revalidation_service.httpx.AsyncClient") as MockClient:
        client_instance = AsyncMock()
        client_instance.post.side_effect = httpx.ConnectError("refused")
        MockClient.return_value.__aenter__ = AsyncMock(return_value=client_instance)
        MockClient.return_value.__aexit__ = AsyncMock(return_value=None)

        assert await revalidation_service.notify_frontend(["/blog"]) is False


@pytest.mark.asyncio
async def test_revalidate_due_skips_when_settings_unreadable(fake_supabase):
    fake_supabase.fail("revalidation_settings", Exception("connection refused"))

    with patch.object(revalidation_service, "revalidate", new_callable=AsyncMock) as mock_revalidate:
        results = await revalidation_service.revalidate_due()

    assert results == []
    mock_revalidate.assert_not_awaited()


def test_strict_settings_read_propagates_failure(fake_supabase):
    fake_supabase.fail("revalidation_settings", Exception("connection refused"))

    assert get_revalidation_settings() == RevalidationSettings()
    with pytest.raises(DatabaseError):
        get_revalidation_settings(strict=True)


def test_settings_default_when_row_missing(fake_supabase):
    assert get_revalidation_settings() == RevalidationSettings()


def test_settings_default_when_row_invalid(fake_supabase):
    fake_supabase.seed("revalidation_settings", [{"id": 1, "enabled": True, "intervals": {"skills": -5}}])
    assert get_revalidation_settings() == RevalidationSettings()


def test_settings_round_trip(fake_supabase):
    settings = RevalidationSettings(enabled=False, intervals={"blog": 30})
    save_revalidation_settings(settings)

    loaded = get_revalidation_settings()
    assert loaded.enabled is False
    assert loaded.intervals["blog"] == 30
    assert loaded.intervals["skills"] == 60
