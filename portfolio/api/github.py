"""GitHub endpoints: public profile data and the repository webhook."""

import json
from typing import Any

import httpx
from fastapi import APIRouter, Header, HTTPException, Request

from portfolio.api.errors import http_error
from portfolio.core.config import get_settings
from portfolio.core.content_types import ContentType
from portfolio.core.logging import get_logger
from portfolio.services.github_service import GitHubService
from portfolio.services.github_webhook import NO_PROJECT, process_event, verify_signature
from portfolio.services.revalidation_service import revalidate

logger = get_logger(__name__)

router = APIRouter(prefix="/github")


def _service_and_username() -> tuple[GitHubService, str]:
    settings = get_settings()
    if not settings.GITHUB_USERNAME:
        raise HTTPException(status_code=503, detail="GitHub integration is not configured")
    return GitHubService(settings.GITHUB_TOKEN), settings.GITHUB_USERNAME


def _github_failure(e: httpx.HTTPError, detail: str) -> HTTPException:
    logger.warning(f"{detail}: {e}")
    if isinstance(e, httpx.HTTPStatusError) and e.response.status_code == 404:
        return HTTPException(status_code=404, detail="GitHub user not found")
    return HTTPException(status_code=502, detail=detail)


@router.get("/profile")
async def get_profile() -> dict[str, Any]:
    service, username = _service_and_username()
    try:
        return await service.get_profile(username)
    except httpx.HTTPError as e:
        raise _github_failure(e, "Failed to fetch GitHub profile") from e


@router.get("/stats")
async def get_stats() -> dict[str, Any]:
    service, username = _service_and_username()
    try:
        return await service.get_repository_stats(username)
    except httpx.HTTPError as e:
        raise _github_failure(e, "Failed to fetch GitHub statistics") from e


@router.post("/webhook")
async def github_webhook(
    request: Request,
    x_github_event: str | None = Header(None, alias="X-GitHub-Event"),
    x_hub_signature_256: str | None = Header(None, alias="X-Hub-Signature-256"),
) -> dict[str, Any]:
    """
    Receive repository events and turn them into research project progress.

    The raw body is verified against GITHUB_WEBHOOK_SECRET before parsing.
    """
    payload = await request.body()

    if not verify_signature(payload, x_hub_signature_256, get_settings().GITHUB_WEBHOOK_SECRET):
        logger.warning("Rejected GitHub webhook with invalid signature")
        raise HTTPException(status_code=401, detail="Invalid signature")

    if not x_github_event:
        raise HTTPException(status_code=400, detail="Missing X-GitHub-Event header")

    try:
        data = json.loads(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid JSON payload") from e

    try:
        result = process_event(x_github_event, data)
    except Exception as e:
        raise http_error(e, f"Failed to process GitHub {x_github_event} event") from e

    if result is None:
        return {"success": True, "message": f"Event {x_github_event} not handled"}

    if result != NO_PROJECT:
        await revalidate(ContentType.RESEARCH_PROJECTS)
    return {"success": True, **result}
