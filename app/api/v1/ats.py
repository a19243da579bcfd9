from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from app.ai.types import AIClient
from app.core.deps import get_ai, get_optional_supabase
from app.core.errors import DomainError, to_http_exception
from app.core.rate_limit import rate_limit
from app.integrations.supabase import SupabaseClient
from app.schemas.ats import ATSAnalysisRequest, ATSStatusRequest, ATSStatusResponse
from app.schemas.resume import ATSAnalysis
from app.services.ats_service import get_ats_status, run_ats_analysis

router = APIRouter()


@router.post("/ats/analyze", response_model=ATSAnalysis)
@rate_limit()
async def analyze_resume(
    request: Request,
    payload: ATSAnalysisRequest,
    ai: AIClient = Depends(get_ai),
    supabase: SupabaseClient | None = Depends(get_optional_supabase),
):
    _ = request
    try:
        return await run_ats_analysis(payload, ai=ai, supabase=supabase)
    except DomainError as exc:
        raise to_http_exception(exc) from exc


@router.post("/ats/status", response_model=ATSStatusResponse)
async def analysis_status(payload: ATSStatusRequest):
    return get_ats_status(payload)
