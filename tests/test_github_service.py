"""Tests for the GitHub REST service."""

from unittest.mock import AsyncMock, patch

import pytest

from portfolio.services.github_service import GitHubService


def _repo(name, stars, language="Python", fork=False, forks=0):
    return {
        "id": hash(name) % 1000,
        "name": name,
        "html_url": f"https://github.com/me/{name}",
        "stargazers_count": stars,
        "forks_count": forks,
        "language": language,
        "fork": fork,
    }


def test_token_sets_authorization_header():
    assert GitHubService("abc")._headers["Authorization"] == "token abc"
    assert "Authorization" not in GitHubService()._headers


@pytest.mark.asyncio
async def test_repository_stats_exclude_forks_and_keep_top_six():
    repos = [_repo(f"repo-{i}", stars=i, forks=1) for i in range(8)]
    repos.append(_repo("forked", stars=500, language="Go", fork=True))
    repos.append(_repo("tool", stars=2, language="Rust"))

    service = GitHubService("token")
    with patch.object(service, "_get", AsyncMock(return_value=repos)):
        stats = await service.get_repository_stats("me")

    assert stats["total_repositories"] == 9
    assert stats["total_stars"] == sum(range(8)) + 2
    assert stats["total_forks"] == 8
    assert stats["languages"] == {"Python": 8, "Rust": 1}
    assert [r["name"] for r in stats["top_repositories"]] == [
        "repo-7",
        "repo-6",
        "repo-5",
        "repo-4",
        "repo-3",
        "repo-2",
    ]


@pytest.mark.asyncio
async def test_profile_combines_user_and_repositories():
    user = {"login": "me", "name": "Me", "public_repos": 3, "followers": 10}
    service = GitHubService()

    with patch.object(service, "_get", AsyncMock(side_effect=[user, [_repo("site", 4)]])) as mock_get:
        profile = await service.get_profile("me")

    assert profile["login"] == "me"
    assert profile["following"] == 0
    assert profile["repositories"][0]["url"] == "https://github.com/me/site"
    assert mock_get.await_args_list[0].args == ("/users/me",)
