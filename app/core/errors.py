from __future__ import annotations

import logging

from fastapi import HTTPException

from app.ai.types import LLMError
from app.integrations.supabase import SupabaseError
from app.services.errors import ServiceError

logger = logging.getLogger(__name__)

DomainError = (LLMError, SupabaseError, ServiceError)


def to_http_exception(exc: LLMError | SupabaseError | ServiceError) -> HTTPException:
    status_code = exc.status_code
    # Upstream 4xx from the database or LLM still means the request could not be served here.
    if isinstance(exc, (LLMError, SupabaseError)) and status_code < 500:
        status_code = 502
    if status_code >= 500:
        logger.warning("request_failed type=%s status=%s: %s", type(exc).__name__, status_code, exc)
    return HTTPException(status_code=status_code, detail=str(exc))
