"""GitHub REST API service for the public profile and repository stats.

Uses httpx for async HTTP requests.
"""

from __future__ import annotations

import httpx

from portfolio.core.logging import get_logger

logger = get_logger(__name__)

GITHUB_API = "https://api.github.com"
TOP_REPOSITORIES = 6


class GitHubService:
    """Read-only access to a GitHub account."""

    def __init__(self, token: str | None = None):
        self.token = token
        self._headers = {"Accept": "application/vnd.github.v3+json"}
        if token:
            self._headers["Authorization"] = f"token {token}"
        else:
            logger.warning("No GitHub token configured; API calls are rate limited")

    async def _get(self, path: str, params: dict | None = None):
        async with httpx.AsyncClient(timeout=15) as client:
            resp = await client.get(f"{GITHUB_API}{path}", headers=self._headers, params=params)
            resp.raise_for_status()
            return resp.json()

    async def get_profile(self, username: str) -> dict:
        """Profile summary plus the most recently updated repositories."""
        user = await self._get(f"/users/{username}")
        repos = await self._get(
            f"/users/{username}/repos",
            {"sort": "updated", "per_page": 12, "type": "owner"},
        )
        return {
            "login": user.get("login"),
            "name": user.get("name"),
            "avatar_url": user.get("avatar_url"),
            "bio": user.get("bio"),
            "html_url": user.get("html_url"),
            "public_repos": user.get("public_repos", 0),
            "followers": user.get("followers", 0),
            "following": user.get("following", 0),
            "created_at": user.get("created_at"),
            "repositories": [_repository_summary(repo) for repo in repos],
        }

    async def get_repository_stats(self, username: str) -> dict:
        """
        Aggregate statistics across the account's own repositories.

        Forks are excluded from totals and language breakdown.
        """
        repos = await self._get(
            f"/users/{username}/repos",
            {"sort": "updated", "per_page": 100, "type": "owner"},
        )
        owned = [repo for repo in repos if not repo.get("fork")]

        languages: dict[str, int] = {}
        for repo in owned:
            language = repo.get("language")
            if language:
                languages[language] = languages.get(language, 0) + 1

        top = sorted(owned, key=lambda repo: repo.get("stargazers_count", 0), reverse=True)

        return {
            "total_repositories": len(owned),
            "total_stars": sum(repo.get("stargazers_count", 0) for repo in owned),
            "total_forks": sum(repo.get("forks_count", 0) for repo in owned),
            "languages": dict(sorted(languages.items(), key=lambda item: item[1], reverse=True)),
            "top_repositories": [_repository_summary(repo) for repo in top[:TOP_REPOSITORIES]],
        }


def _repository_summary(repo: dict) -> dict:
    return {
        "id": repo.get("id"),
        "name": repo.get("name"),
        "description": repo.get("description"),
        "url": repo.get("html_url"),
        "stars": repo.get("stargazers_count", 0),
        "forks": repo.get("forks_count", 0),
        "language": repo.get("language"),
        "topics": repo.get("topics") or [],
        "updated_at": repo.get("updated_at"),
    }
