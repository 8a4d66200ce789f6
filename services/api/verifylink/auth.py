"""Identity provider integration.

Requests carry `Authorization: Bearer <access token>` issued by a Supabase Auth
compatible provider. The token is resolved with:

    GET {auth_url}/auth/v1/user
    Authorization: Bearer <token>
    apikey: <auth_api_key>

The resolved user becomes a Principal that routes pass explicitly into the
core services. A missing or rejected token resolves to None; services decide
whether that is acceptable.
"""

import logging
from typing import Any

from fastapi import Header
import httpx

from verifylink.services.errors import Unauthenticated
from verifylink.services.principal import Principal
from verifylink.settings import get_settings

logger = logging.getLogger("uvicorn.error")


def principal_from_user(user: dict[str, Any], admin_role: str) -> Principal | None:
    """Build a Principal from the provider's user payload."""
    user_id = str(user.get("id") or "").strip()
    if not user_id:
        return None
    app_metadata = user.get("app_metadata")
    role = app_metadata.get("role") if isinstance(app_metadata, dict) else None
    return Principal(
        user_id=user_id,
        email=user.get("email"),
        is_admin=role == admin_role,
    )


async def fetch_user(token: str) -> dict[str, Any] | None:
    """Resolve an access token against the identity provider.

    Returns:
        User payload, or None when the provider rejects the token.

    Raises:
        Unauthenticated: Provider unreachable (session cannot be verified).
    """
    settings = get_settings()
    url = f"{settings.auth_url.rstrip('/')}/auth/v1/user"
    headers = {"Authorization": f"Bearer {token}"}
    if settings.auth_api_key:
        headers["apikey"] = settings.auth_api_key

    try:
        async with httpx.AsyncClient(timeout=settings.auth_timeout_seconds) as client:
            resp = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"[auth] identity provider unreachable: {type(e).__name__}")
        raise Unauthenticated("Could not verify your session, please sign in again") from e

    if resp.status_code in (401, 403):
        return None
    if resp.status_code != 200:
        logger.error(f"[auth] identity provider error: {resp.status_code} - {resp.text[:200]}")
        raise Unauthenticated("Could not verify your session, please sign in again")

    data = resp.json()
    return data if isinstance(data, dict) else None


async def get_principal(authorization: str = Header(default="")) -> Principal | None:
    """FastAPI dependency: resolve the bearer token into a Principal (or None)."""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None

    user = await fetch_user(token.strip())
    if user is None:
        return None
    return principal_from_user(user, get_settings().admin_role)
