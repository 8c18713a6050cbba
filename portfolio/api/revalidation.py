"""API endpoints for content revalidation and its schedule."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path

from portfolio.api.errors import http_error
from portfolio.core.auth_middleware import AuthContext, get_current_user, require_admin, require_cron_secret, secrets_match
from portfolio.core.config import get_settings
from portfolio.core.content_types import ContentType
from portfolio.core.logging import get_logger
from portfolio.core.revalidation import build_status
from portfolio.core.schemas_revalidation import (
    RevalidationRequest,
    RevalidationResult,
    RevalidationSettings,
    RevalidationSettingsUpdate,
    RevalidationStatus,
)
from portfolio.db.revalidation_settings import get_revalidation_settings, save_revalidation_settings
from portfolio.services.revalidation_service import revalidate, revalidate_due

logger = get_logger(__name__)

router = APIRouter()


def _authorize(auth: Optional[AuthContext], body: Optional[RevalidationRequest]) -> None:
    """Admins may always revalidate; others need the shared secret."""
    if auth is not None and auth.is_admin:
        return
    secret = body.secret if body else None
    if secrets_match(secret, get_settings().REVALIDATION_SECRET):
        return
    raise HTTPException(status_code=401, detail="Invalid revalidation secret")


def _parse_content_type(value: str) -> ContentType:
    try:
        return ContentType(value)
    except ValueError:
        valid = ", ".join(ct.value for ct in ContentType)
        raise HTTPException(
            status_code=400,
            detail=f"Invalid content type: {value}. Expected one of: {valid}",
        ) from None


@router.post("/revalidate/{content_type}", response_model=RevalidationResult)
async def revalidate_content(
    content_type: str = Path(..., description="Content type to revalidate"),
    body: Optional[RevalidationRequest] = Body(None),
    auth: Optional[AuthContext] = Depends(get_current_user),
) -> RevalidationResult:
    """
    Revalidate one content type on demand.

    Accepts either an admin caller or a body secret matching
    REVALIDATION_SECRET (used by deploy hooks).
    """
    _authorize(auth, body)
    parsed = _parse_content_type(content_type)
    try:
        return await revalidate(parsed)
    except Exception as e:
        raise http_error(e, f"Failed to revalidate {content_type}") from e


@router.post("/revalidate-all", response_model=RevalidationResult)
async def revalidate_all(
    body: Optional[RevalidationRequest] = Body(None),
    auth: Optional[AuthContext] = Depends(get_current_user),
) -> RevalidationResult:
    _authorize(auth, body)
    try:
        return await revalidate(ContentType.ALL)
    except Exception as e:
        raise http_error(e, "Failed to revalidate all content") from e


@router.get("/cron/revalidate", dependencies=[Depends(require_cron_secret)])
async def cron_revalidate() -> dict[str, Any]:
    """Revalidate every content type whose interval has elapsed."""
    try:
        results = await revalidate_due()
    except Exception as e:
        raise http_error(e, "Scheduled revalidation failed") from e

    revalidated = [result.content_type for result in results]
    logger.info(f"Cron revalidation covered: {', '.join(revalidated) or 'nothing due'}")
    return {"success": True, "revalidated": revalidated, "results": results}


@router.get("/admin/revalidation/settings", response_model=RevalidationSettings)
async def get_settings_endpoint(auth: AuthContext = Depends(require_admin)) -> RevalidationSettings:
    return get_revalidation_settings()


@router.put("/admin/revalidation/settings", response_model=RevalidationSettings)
async def update_settings_endpoint(
    update: RevalidationSettingsUpdate,
    auth: AuthContext = Depends(require_admin),
) -> RevalidationSettings:
    """Change the schedule; intervals are merged over the current ones."""
    current = get_revalidation_settings()
    changes: dict[str, Any] = {}
    if update.enabled is not None:
        changes["enabled"] = update.enabled
    if update.intervals is not None:
        changes["intervals"] = {**current.intervals, **update.intervals}

    try:
        updated = RevalidationSettings.model_validate({**current.model_dump(), **changes})
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    try:
        return save_revalidation_settings(updated)
    except Exception as e:
        raise http_error(e, "Failed to save revalidation settings") from e


@router.get("/admin/revalidation/status", response_model=RevalidationStatus)
async def revalidation_status(auth: AuthContext = Depends(require_admin)) -> RevalidationStatus:
    return build_status(get_revalidation_settings())
