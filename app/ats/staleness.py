from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field

from app.ats.fingerprint import create_resume_content_hash
from app.schemas.resume import ResumeContent

RECENT_WINDOW_MINUTES = 5
MAX_ANALYSIS_AGE = timedelta(days=30)

REASON_NO_ANALYSIS = "No ATS analysis available"
REASON_CONTENT_CHANGED = "Content has changed since last analysis"
REASON_TOO_OLD = "Analysis is over 30 days old"
REASON_CURRENT = "Analysis is current"


class ReAnalysisAdvice(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    should_suggest: bool = Field(alias="shouldSuggest")
    reason: str


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def has_content_changed_since_analysis(content: ResumeContent, job_description: str | None = "") -> bool:
    analysis = content.ats_analysis
    if analysis is None or not analysis.content_hash:
        return True
    return create_resume_content_hash(content, job_description) != analysis.content_hash


def is_analysis_recent(
    content: ResumeContent,
    within_minutes: int = RECENT_WINDOW_MINUTES,
    *,
    now: datetime | None = None,
) -> bool:
    analysis = content.ats_analysis
    if analysis is None or analysis.analyzed_at is None:
        return False
    cutoff = _as_utc(now or _utc_now()) - timedelta(minutes=within_minutes)
    return _as_utc(analysis.analyzed_at) > cutoff


def should_suggest_re_analysis(
    content: ResumeContent,
    job_description: str | None = "",
    *,
    now: datetime | None = None,
) -> ReAnalysisAdvice:
    analysis = content.ats_analysis
    if analysis is None:
        return ReAnalysisAdvice(should_suggest=True, reason=REASON_NO_ANALYSIS)

    if has_content_changed_since_analysis(content, job_description):
        return ReAnalysisAdvice(should_suggest=True, reason=REASON_CONTENT_CHANGED)

    if analysis.analyzed_at is not None:
        age = _as_utc(now or _utc_now()) - _as_utc(analysis.analyzed_at)
        if age > MAX_ANALYSIS_AGE:
            return ReAnalysisAdvice(should_suggest=True, reason=REASON_TOO_OLD)

    return ReAnalysisAdvice(should_suggest=False, reason=REASON_CURRENT)
