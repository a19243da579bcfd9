from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from app.integrations.supabase import Filter, SupabaseClient, SupabaseError
from app.schemas.subscription import (
    ExpiryResult,
    ExpirySweepResponse,
    Subscription,
    SubscriptionOverview,
    SubscriptionPermissions,
    SubscriptionUsage,
)
from app.subscriptions import (
    UNLIMITED,
    compute_usage,
    default_usage,
    get_redundancy_message,
    get_subscription_limits,
    is_interview_tier,
    subscription_period_range,
    tier_includes_resume_features,
)

logger = logging.getLogger(__name__)

_DEFAULT_TIER = "free"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _subscription_type_for(tier: str) -> str:
    return "resume" if tier.startswith("resume_") else "interview"


async def get_profile_tier(supabase: SupabaseClient, user_id: str) -> str:
    profile = await supabase.select_one(
        "profiles",
        [("id", "eq", user_id)],
        columns="id,subscription_tier,subscription_status",
    )
    tier = (profile or {}).get("subscription_tier")
    return str(tier) if tier else _DEFAULT_TIER


async def get_current_subscription(
    supabase: SupabaseClient,
    user_id: str,
    subscription_type: str | None = None,
    *,
    statuses: Sequence[str] = ("active",),
) -> Subscription | None:
    """Most recent subscription for the user in one of ``statuses``; None on lookup failure."""
    filters: list[Filter] = [("user_id", "eq", user_id)]
    if len(statuses) == 1:
        filters.append(("payment_status", "eq", statuses[0]))
    else:
        filters.append(("payment_status", "in", list(statuses)))
    if subscription_type:
        filters.append(("subscription_type", "eq", subscription_type))
    try:
        rows = await supabase.select("subscriptions", filters=filters, order="start_date.desc", limit=1)
    except SupabaseError as exc:
        logger.error("active_subscription_lookup_failed user_id=%s: %s", user_id, exc)
        return None
    return Subscription(**rows[0]) if rows else None


async def get_active_subscription(
    supabase: SupabaseClient,
    user_id: str,
    subscription_type: str | None = None,
) -> Subscription | None:
    return await get_current_subscription(supabase, user_id, subscription_type)


async def get_subscription_usage(
    supabase: SupabaseClient,
    user_id: str,
    tier: str,
    *,
    now: datetime | None = None,
) -> SubscriptionUsage:
    limits = get_subscription_limits(tier)
    try:
        subscription = await get_active_subscription(supabase, user_id)
        period = subscription_period_range(subscription, now)
        start_iso = period.start.isoformat()
        end_iso = period.end.isoformat()

        standard_used = await supabase.count(
            "interviews",
            [("user_id", "eq", user_id), ("start_time", "gte", start_iso), ("start_time", "lte", end_iso)],
        )
        advanced_used = await supabase.count(
            "advanced_interview_sessions",
            [
                ("user_id", "eq", user_id),
                ("status", "eq", "completed"),
                ("created_at", "gte", start_iso),
                ("created_at", "lte", end_iso),
            ],
        )
        resumes_used = await supabase.count(
            "user_resumes",
            [("user_id", "eq", user_id), ("created_at", "gte", start_iso), ("created_at", "lte", end_iso)],
        )

        typed_subscription = await get_active_subscription(supabase, user_id, _subscription_type_for(tier))
        next_reset = typed_subscription.end_date if typed_subscription else None
    except SupabaseError as exc:
        logger.error("subscription_usage_failed user_id=%s tier=%s: %s", user_id, tier, exc)
        return default_usage(limits, now)

    return compute_usage(
        limits,
        standard_used=standard_used,
        advanced_used=advanced_used,
        resumes_used=resumes_used,
        period=period,
        next_reset=next_reset,
    )


async def get_effective_interview_tier(supabase: SupabaseClient, user_id: str, tier: str) -> str:
    """Tier that governs interview access; resume-only subscribers map to ``no_interviews``."""
    if is_interview_tier(tier):
        return tier
    interview_subscription = await get_active_subscription(supabase, user_id, "interview")
    if interview_subscription and interview_subscription.payment_status == "active":
        return interview_subscription.plan_type
    return "no_interviews"


async def _is_suspended(supabase: SupabaseClient, user_id: str, subscription_type: str | None) -> bool:
    current = await get_current_subscription(
        supabase,
        user_id,
        subscription_type,
        statuses=("active", "suspended"),
    )
    return current is not None and current.payment_status == "suspended"


async def _can_start_interview(supabase: SupabaseClient, user_id: str, tier: str, *, advanced: bool) -> bool:
    interview_tier = await get_effective_interview_tier(supabase, user_id, tier)
    if await _is_suspended(supabase, user_id, "interview"):
        return False
    limits = get_subscription_limits(interview_tier)
    if limits.is_unlimited:
        return True
    usage = await get_subscription_usage(supabase, user_id, interview_tier)
    remaining = usage.advanced_interviews_remaining if advanced else usage.standard_interviews_remaining
    return remaining > 0


async def can_start_standard_interview(supabase: SupabaseClient, user_id: str, tier: str) -> bool:
    return await _can_start_interview(supabase, user_id, tier, advanced=False)


async def can_start_advanced_interview(supabase: SupabaseClient, user_id: str, tier: str) -> bool:
    return await _can_start_interview(supabase, user_id, tier, advanced=True)


async def can_download_resume(supabase: SupabaseClient, user_id: str, tier: str) -> bool:
    if await _is_suspended(supabase, user_id, None):
        return False
    limits = get_subscription_limits(tier)
    if limits.resume_downloads == UNLIMITED or limits.resume_downloads > 0:
        return True
    return tier.startswith("resume_")


async def can_create_resume(supabase: SupabaseClient, user_id: str, tier: str) -> bool:
    subscription_type = _subscription_type_for(tier)
    if await _is_suspended(supabase, user_id, subscription_type):
        usage = await get_subscription_usage(supabase, user_id, tier)
        if usage.resumes_remaining != UNLIMITED and usage.resumes_remaining <= 0:
            return False

    limits = get_subscription_limits(tier)
    if limits.max_resumes == UNLIMITED:
        return True
    usage = await get_subscription_usage(supabase, user_id, tier)
    return usage.resumes_remaining > 0


async def get_subscription_overview(supabase: SupabaseClient, user_id: str) -> SubscriptionOverview:
    try:
        rows = await supabase.select(
            "subscriptions",
            filters=[("user_id", "eq", user_id), ("payment_status", "in", ["active", "suspended"])],
            order="start_date.desc",
        )
    except SupabaseError as exc:
        logger.error("subscription_overview_failed user_id=%s: %s", user_id, exc)
        return SubscriptionOverview()

    subscriptions = [Subscription(**row) for row in rows]
    interview_plan = next(
        (s for s in subscriptions if s.subscription_type == "interview" and s.payment_status == "active"),
        None,
    )
    resume_plan = next(
        (s for s in subscriptions if s.subscription_type == "resume" and s.payment_status == "active"),
        None,
    )
    return SubscriptionOverview(
        has_interview_plan=interview_plan is not None,
        has_resume_plan=resume_plan is not None,
        interview_plan=interview_plan,
        resume_plan=resume_plan,
        interview_plan_includes_resume=(
            tier_includes_resume_features(interview_plan.plan_type) if interview_plan else False
        ),
    )


async def get_permissions(supabase: SupabaseClient, user_id: str, tier: str) -> SubscriptionPermissions:
    overview = await get_subscription_overview(supabase, user_id)
    redundancy = None
    if overview.interview_plan and overview.resume_plan:
        redundancy = get_redundancy_message(
            overview.interview_plan.plan_type,
            overview.resume_plan.plan_type,
            overview.resume_plan.payment_status,
        )
    return SubscriptionPermissions(
        tier=tier,
        effective_interview_tier=await get_effective_interview_tier(supabase, user_id, tier),
        can_start_standard_interview=await can_start_standard_interview(supabase, user_id, tier),
        can_start_advanced_interview=await can_start_advanced_interview(supabase, user_id, tier),
        can_download_resume=await can_download_resume(supabase, user_id, tier),
        can_create_resume=await can_create_resume(supabase, user_id, tier),
        redundancy_message=redundancy,
    )


async def expire_canceled_subscriptions(
    supabase: SupabaseClient,
    *,
    now: datetime | None = None,
) -> ExpirySweepResponse:
    """Mark canceled subscriptions past their end date as expired and downgrade their owners to bronze."""
    now = now or _utc_now()
    expired = await supabase.select(
        "subscriptions",
        columns="id,user_id,payment_provider_subscription_id,plan_type,end_date",
        filters=[("payment_status", "eq", "canceled"), ("end_date", "lt", now.isoformat())],
    )
    logger.info("expiry_sweep_started candidates=%s", len(expired))

    results: list[ExpiryResult] = []
    for row in expired:
        subscription_id = str(row.get("id"))
        user_id = row.get("user_id")
        try:
            await supabase.update("subscriptions", {"payment_status": "expired"}, [("id", "eq", subscription_id)])
            await supabase.update(
                "profiles",
                {"subscription_tier": "bronze", "subscription_status": "expired"},
                [("id", "eq", user_id)],
            )
        except SupabaseError as exc:
            logger.error("expiry_sweep_item_failed subscription_id=%s: %s", subscription_id, exc)
            results.append(ExpiryResult(subscription_id=subscription_id, success=False, error=str(exc)))
            continue
        logger.info("expiry_sweep_item_done subscription_id=%s user_id=%s", subscription_id, user_id)
        results.append(ExpiryResult(subscription_id=subscription_id, success=True))

    return ExpirySweepResponse(success=True, processed=len(expired), results=results, timestamp=_utc_now())
