"""Authentication dependencies for the admin and cron endpoints."""

import hmac
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portfolio.core.config import get_settings
from portfolio.core.logging import get_logger

logger = get_logger(__name__)

# HTTP Bearer scheme for Authorization header
security = HTTPBearer(auto_error=False)

API_KEY_ADMIN = "api-key@admin"


class AuthContext:
    """Who is calling, and how they proved it."""

    def __init__(self, email: str, method: str, token: Optional[str] = None):
        self.email = email
        self.method = method
        self.token = token

    @property
    def is_admin(self) -> bool:
        if self.method == "api_key":
            return True
        return self.email.lower() in get_settings().admin_emails

    @property
    def display_name(self) -> str:
        return "Admin" if self.method == "api_key" else self.email


def secrets_match(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison; an unset expected secret never matches."""
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> Optional[AuthContext]:
    """
    Extract and validate the caller.

    Supports two authentication methods:
    1. Admin API key (X-API-Key header) - for scripts and tooling
    2. Supabase JWT tokens (Bearer auth) - for the admin dashboard

    Returns None if no valid auth is present.
    """
    settings = get_settings()

    if x_api_key and secrets_match(x_api_key, settings.ADMIN_API_KEY):
        logger.debug("Authenticated via admin API key")
        return AuthContext(email=API_KEY_ADMIN, method="api_key", token="api-key")

    if not credentials:
        return None

    token = credentials.credentials

    try:
        from portfolio.db.supabase_client import get_supabase

        auth_response = get_supabase().auth.get_user(token)
        if not auth_response or not auth_response.user or not auth_response.user.email:
            return None

        return AuthContext(email=auth_response.user.email, method="jwt", token=token)

    except Exception as e:
        logger.warning(f"Auth error: {e}")
        return None


async def require_auth(
    auth: Optional[AuthContext] = Depends(get_current_user),
) -> AuthContext:
    """Require authentication. Raises 401 if not authenticated."""
    if not auth:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth


async def require_admin(
    auth: AuthContext = Depends(require_auth),
) -> AuthContext:
    """Require an admin. Raises 403 for authenticated non-admins."""
    if not auth.is_admin:
        logger.warning(f"Admin access denied for {auth.email}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return auth


async def require_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> None:
    """Require Authorization: Bearer <REVALIDATION_SECRET>."""
    provided = credentials.credentials if credentials else None
    if not secrets_match(provided, get_settings().REVALIDATION_SECRET):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
