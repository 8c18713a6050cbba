"""Tests for the GitHub endpoints."""

import hashlib
import hmac
import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from fastapi.testclient import TestClient

from portfolio.main import app
from portfolio.services.github_webhook import NO_PROJECT

client = TestClient(app)

SECRET = "test-webhook-secret"


def _post_webhook(payload, event="push", secret=SECRET, raw=None):
    body = raw if raw is not None else json.dumps(payload).encode()
    headers = {"X-Hub-Signature-256": "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()}
    if event:
        headers["X-GitHub-Event"] = event
    return client.post("/v1/github/webhook", content=body, headers=headers)


def test_bad_signature_is_401():
    with patch("portfolio.api.github.process_event") as mock_process:
        response = _post_webhook({"zen": "hi"}, secret="wrong")

    assert response.status_code == 401
    mock_process.assert_not_called()


def test_missing_event_header_is_400():
    assert _post_webhook({}, event=None).status_code == 400


def test_invalid_json_is_400():
    assert _post_webhook(None, raw=b"{not json").status_code == 400


def test_unhandled_event():
    response = _post_webhook({"zen": "hi"}, event="ping")

    assert response.json() == {"success": True, "message": "Event ping not handled"}


def test_handled_event_revalidates_research():
    result = {"message": "Added 1 commits as updates to project 1", "project_id": 1}
    with patch("portfolio.api.github.process_event", return_value=result), patch(
        "portfolio.api.github.revalidate", new_callable=AsyncMock
    ) as mock_revalidate:
        response = _post_webhook({"commits": []})

    assert response.status_code == 200
    assert response.json() == {"success": True, **result}
    mock_revalidate.assert_awaited_once()


def test_unlinked_repository_skips_revalidation():
    with patch("portfolio.api.github.process_event", return_value=dict(NO_PROJECT)), patch(
        "portfolio.api.github.revalidate", new_callable=AsyncMock
    ) as mock_revalidate:
        response = _post_webhook({"repository": {"html_url": "https://github.com/x/y"}})

    assert response.json()["message"] == NO_PROJECT["message"]
    mock_revalidate.assert_not_awaited()


def test_profile_requires_username(monkeypatch):
    monkeypatch.delenv("GITHUB_USERNAME", raising=False)
    assert client.get("/v1/github/profile").status_code == 503


def test_profile_unknown_user_is_404(monkeypatch):
    monkeypatch.setenv("GITHUB_USERNAME", "ghost")
    error = httpx.HTTPStatusError("missing", request=MagicMock(), response=MagicMock(status_code=404))

    with patch(
        "portfolio.api.github.GitHubService.get_profile", new_callable=AsyncMock, side_effect=error
    ):
        response = client.get("/v1/github/profile")

    assert response.status_code == 404


def test_stats_upstream_failure_is_502(monkeypatch):
    monkeypatch.setenv("GITHUB_USERNAME", "me")

    with patch(
        "portfolio.api.github.GitHubService.get_repository_stats",
        new_callable=AsyncMock,
        side_effect=httpx.ConnectError("down"),
    ):
        response = client.get("/v1/github/stats")

    assert response.status_code == 502
