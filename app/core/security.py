from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException, status

from app.core.config import settings
from app.core.deps import get_supabase
from app.integrations.supabase import AuthUser, SupabaseClient, SupabaseError


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def _resolve_user(token: str | None, supabase: SupabaseClient) -> AuthUser | None:
    if not token:
        return None
    try:
        return await supabase.get_user(token)
    except SupabaseError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


async def optional_user(
    authorization: str | None = Header(default=None),
    supabase: SupabaseClient = Depends(get_supabase),
) -> AuthUser | None:
    return await _resolve_user(_bearer_token(authorization), supabase)


async def require_user(
    authorization: str | None = Header(default=None),
    supabase: SupabaseClient = Depends(get_supabase),
) -> AuthUser:
    user = await _resolve_user(_bearer_token(authorization), supabase)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def check_cron_key(x_cron_key: str | None = Header(default=None, alias="X-Cron-Key")) -> None:
    if not settings.cron_api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Scheduled jobs are not configured.",
        )
    if not x_cron_key or not secrets.compare_digest(x_cron_key, settings.cron_api_key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid cron key.")
