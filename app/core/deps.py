from __future__ import annotations

from fastapi import HTTPException, Request, status

from app.ai.types import AIClient
from app.integrations.supabase import SupabaseClient


def get_supabase(request: Request) -> SupabaseClient:
    client = getattr(request.app.state, "supabase", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database is not configured",
        )
    return client


def get_optional_supabase(request: Request) -> SupabaseClient | None:
    return getattr(request.app.state, "supabase", None)


def get_ai(request: Request) -> AIClient:
    client = getattr(request.app.state, "ai_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="OpenAI API key is not configured",
        )
    return client
