from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from app.ai.types import AIClient
from app.ats import (
    classify_score,
    create_resume_content_hash,
    get_score_color_class,
    has_content_changed_since_analysis,
    is_analysis_recent,
    should_suggest_re_analysis,
)
from app.integrations.supabase import SupabaseClient, SupabaseError
from app.prompts.ats import ATS_ANALYSIS_FUNCTION, build_analysis_messages, is_ats_optimized_template
from app.schemas.ats import ATSAnalysisRequest, ATSStatusRequest, ATSStatusResponse
from app.schemas.resume import ATSAnalysis, DetailedAssessment, ResumeContent
from app.services.errors import ServiceError

logger = logging.getLogger(__name__)

ANALYSIS_TEMPERATURE = 0.7


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float)) and str(item).strip()]


def _clamp_score(value: object) -> int:
    try:
        score = int(round(float(value)))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, score))


def _detailed_assessment(value: object) -> DetailedAssessment:
    if not isinstance(value, dict):
        return DetailedAssessment()
    try:
        return DetailedAssessment.model_validate(value)
    except ValidationError:
        logger.warning("ats_detailed_assessment_invalid keys=%s", sorted(value.keys()))
        return DetailedAssessment()


def analysis_from_function_args(
    args: dict,
    *,
    content_hash: str,
    analyzed_at: datetime,
) -> ATSAnalysis:
    """Build an ATSAnalysis from ``provide_ats_analysis`` arguments, repairing missing or out-of-range fields."""
    keyword_matches = _string_list(args.get("keyword_matches"))
    percentage = args.get("keyword_match_percentage")
    if not percentage:
        percentage = min(100, len(keyword_matches) * 10)

    return ATSAnalysis(
        score=_clamp_score(args.get("score")),
        feedback=str(args.get("feedback") or ""),
        keyword_matches=keyword_matches,
        missing_keywords=_string_list(args.get("missing_keywords")),
        formatting_issues=_string_list(args.get("formatting_issues")),
        improvement_suggestions=_string_list(args.get("improvement_suggestions")),
        detailed_assessment=_detailed_assessment(args.get("detailed_assessment")),
        keyword_match_percentage=_clamp_score(percentage),
        content_hash=content_hash,
        analyzed_at=analyzed_at,
        from_cache=False,
    )


async def _cached_analysis(
    supabase: SupabaseClient,
    resume_id: str,
    content_hash: str,
) -> ATSAnalysis | None:
    try:
        row = await supabase.select_one(
            "user_resumes",
            [("id", "eq", resume_id)],
            columns="ats_score,content",
        )
    except SupabaseError as exc:
        logger.warning("ats_cache_lookup_failed resume_id=%s: %s", resume_id, exc)
        return None

    stored = (row or {}).get("content")
    if not isinstance(stored, dict) or not isinstance(stored.get("ats_analysis"), dict):
        return None
    try:
        analysis = ATSAnalysis.model_validate(stored["ats_analysis"])
    except ValidationError:
        logger.warning("ats_cache_entry_invalid resume_id=%s", resume_id)
        return None
    if analysis.content_hash != content_hash:
        return None
    return analysis.model_copy(update={"from_cache": True})


async def run_ats_analysis(
    payload: ATSAnalysisRequest,
    *,
    ai: AIClient,
    supabase: SupabaseClient | None = None,
    now: datetime | None = None,
) -> ATSAnalysis:
    content = payload.resume_content
    if content is None:
        raise ServiceError("Missing resume content", status_code=400)

    job_description = payload.job_description or ""
    content_hash = create_resume_content_hash(content, job_description)

    use_cache = (
        supabase is not None
        and payload.resume_id
        and not payload.force_re_analysis
        and not payload.is_public_upload
    )
    if use_cache:
        cached = await _cached_analysis(supabase, payload.resume_id, content_hash)
        if cached is not None:
            logger.info("ats_analysis_cache_hit resume_id=%s hash=%s", payload.resume_id, content_hash)
            return cached

    if is_ats_optimized_template(payload.template_id):
        logger.info("ats_analysis_optimized_template template_id=%s", payload.template_id)

    messages = build_analysis_messages(content, job_description, payload.template_id)
    args = await ai.call_function(messages, function=ATS_ANALYSIS_FUNCTION, temperature=ANALYSIS_TEMPERATURE)
    analysis = analysis_from_function_args(args, content_hash=content_hash, analyzed_at=now or _utc_now())
    logger.info(
        "ats_analysis_done resume_id=%s score=%s auto=%s public=%s",
        payload.resume_id,
        analysis.score,
        payload.is_auto_analysis,
        payload.is_public_upload,
    )
    return analysis


def get_ats_status(payload: ATSStatusRequest, *, now: datetime | None = None) -> ATSStatusResponse:
    content: ResumeContent = payload.resume_content
    job_description = payload.job_description or ""
    analysis = content.ats_analysis

    response = ATSStatusResponse(
        fingerprint=create_resume_content_hash(content, job_description),
        content_changed=has_content_changed_since_analysis(content, job_description),
        is_recent=is_analysis_recent(content, now=now),
        advice=should_suggest_re_analysis(content, job_description, now=now),
    )
    if analysis is not None:
        response.score = analysis.score
        response.classification = classify_score(analysis.score)
        response.color_class = get_score_color_class(analysis.score)
    return response
