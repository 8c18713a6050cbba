"""Pytest configuration and fixtures."""

import os

import pytest

# Settings are read lazily, but test modules import the app at collection time
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("PORTFOLIO_ENV", "test")
os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
os.environ.setdefault("ADMIN_EMAILS", "owner@example.com")
os.environ.setdefault("REVALIDATION_SECRET", "test-revalidation-secret")
os.environ.setdefault("GITHUB_WEBHOOK_SECRET", "test-webhook-secret")
os.environ.setdefault("ENABLE_REVALIDATION_SCHEDULER", "false")
os.environ.setdefault("DB_RETRY_INITIAL_DELAY", "0")


@pytest.fixture(autouse=True)
def reset_process_state(monkeypatch, tmp_path):
    """Clear cached singletons and give each test its own offline store directory."""
    from portfolio.core.config import get_settings
    from portfolio.core.content_cache import get_content_cache
    from portfolio.core.rate_limiter import get_contact_rate_limiter, get_rag_rate_limiter
    from portfolio.services.offline_storage import get_offline_store
    from portfolio.services.sync_service import get_sync_service

    cached = (
        get_settings,
        get_content_cache,
        get_contact_rate_limiter,
        get_rag_rate_limiter,
        get_offline_store,
        get_sync_service,
    )
    monkeypatch.setenv("OFFLINE_STORAGE_DIR", str(tmp_path / "offline-store"))
    for factory in cached:
        factory.cache_clear()
    yield
    for factory in cached:
        factory.cache_clear()


@pytest.fixture
def fake_supabase():
    """In-memory Supabase stand-in patched into every db module."""
    from unittest.mock import patch

    from tests.fakes.fake_supabase import FakeSupabase

    fake = FakeSupabase()
    targets = [
        "portfolio.db.supabase_client.get_supabase",
        "portfolio.db.projects.get_supabase",
        "portfolio.db.blog.get_supabase",
        "portfolio.db.skills.get_supabase",
        "portfolio.db.timeline.get_supabase",
        "portfolio.db.research_projects.get_supabase",
        "portfolio.db.case_studies.get_supabase",
        "portfolio.db.contact_messages.get_supabase",
        "portfolio.db.analytics.get_supabase",
        "portfolio.db.dashboard.get_supabase",
        "portfolio.db.vector_store.get_supabase",
        "portfolio.db.revalidation_settings.get_supabase",
        "portfolio.db.content.get_supabase",
    ]
    patchers = [patch(target, return_value=fake) for target in targets]
    for patcher in patchers:
        patcher.start()
    yield fake
    for patcher in patchers:
        patcher.stop()


@pytest.fixture
def offline_store(tmp_path):
    from portfolio.services.offline_storage import OfflineStore

    return OfflineStore(tmp_path / "offline")
