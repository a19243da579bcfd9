from __future__ import annotations

from app.core.plans import get_plan_value

_INACTIVE_STATUSES = {"canceled", "expired", "payment_failed", "suspended"}
_TIER_NAMES = {"gold": "Gold", "diamond": "Diamond", "megastar": "Megastar"}


def tier_includes_resume_features(tier: str | None) -> bool:
    return bool(tier) and tier in (get_plan_value("resume_inclusive_tiers", []) or [])


def has_redundant_subscriptions(
    interview_tier: str | None,
    resume_tier: str | None,
    resume_status: str | None = None,
) -> bool:
    """True when a resume-only plan duplicates features the interview plan already includes."""
    if not resume_tier or resume_tier == "free":
        return False
    if resume_status and resume_status in _INACTIVE_STATUSES:
        return False
    return tier_includes_resume_features(interview_tier)


def get_redundancy_message(
    interview_tier: str | None,
    resume_tier: str | None,
    resume_status: str | None = None,
) -> str | None:
    if not has_redundant_subscriptions(interview_tier, resume_tier, resume_status):
        return None
    tier_name = _TIER_NAMES.get(interview_tier or "")
    if tier_name is None:
        return None
    resume_name = "Basic" if resume_tier == "resume_basic" else "Premium"
    return (
        f"Your {tier_name} plan already includes resume features. "
        f"You don't need to pay for a separate Resume {resume_name} plan."
    )
