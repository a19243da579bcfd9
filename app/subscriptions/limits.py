from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone

from app.core.plans import get_plan_value
from app.schemas.subscription import (
    PeriodRange,
    Subscription,
    SubscriptionFeatures,
    SubscriptionLimits,
    SubscriptionUsage,
)

UNLIMITED = -1


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _tier_block(tier: str, section: str) -> dict:
    block = get_plan_value(f"tiers.{tier}.{section}")
    if not isinstance(block, dict):
        block = get_plan_value(f"tiers.free.{section}")
    if not isinstance(block, dict):
        raise RuntimeError(f"Plans config has no '{section}' for tier '{tier}' or 'free'.")
    return block


def get_subscription_limits(tier: str | None) -> SubscriptionLimits:
    """Limits for a tier; unknown tiers fall back to the free plan."""
    return SubscriptionLimits(**_tier_block(tier or "free", "limits"))


def get_subscription_features(tier: str | None) -> SubscriptionFeatures:
    return SubscriptionFeatures(**_tier_block(tier or "free", "features"))


def is_interview_tier(tier: str) -> bool:
    return tier in (get_plan_value("interview_tiers", []) or [])


def _add_one_month(value: datetime) -> datetime:
    year = value.year + (1 if value.month == 12 else 0)
    month = 1 if value.month == 12 else value.month + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def current_month_range(now: datetime | None = None) -> PeriodRange:
    now = now or _utc_now()
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    last_day = calendar.monthrange(now.year, now.month)[1]
    end = now.replace(day=last_day, hour=23, minute=59, second=59, microsecond=999000)
    return PeriodRange(start=start, end=end)


def subscription_period_range(subscription: Subscription | None, now: datetime | None = None) -> PeriodRange:
    """Billing period of the active subscription, or the calendar month without one."""
    if subscription is None or subscription.start_date is None:
        return current_month_range(now)
    start = subscription.start_date
    if subscription.end_date is not None:
        end = subscription.end_date
    else:
        end = _add_one_month(start) - timedelta(seconds=1)
    return PeriodRange(start=start, end=end)


def _remaining(limit: int, used: int) -> int:
    return max(0, limit - used)


def compute_usage(
    limits: SubscriptionLimits,
    *,
    standard_used: int,
    advanced_used: int,
    resumes_used: int,
    period: PeriodRange,
    next_reset: datetime | None = None,
) -> SubscriptionUsage:
    return SubscriptionUsage(
        standard_interviews_used=standard_used,
        advanced_interviews_used=advanced_used,
        standard_interviews_remaining=(
            UNLIMITED if limits.is_unlimited else _remaining(limits.standard_interviews, standard_used)
        ),
        advanced_interviews_remaining=(
            UNLIMITED if limits.is_unlimited else _remaining(limits.advanced_interviews, advanced_used)
        ),
        resumes_used=resumes_used,
        resumes_remaining=UNLIMITED if limits.max_resumes < 0 else _remaining(limits.max_resumes, resumes_used),
        current_period_start=period.start,
        current_period_end=period.end,
        next_reset=next_reset,
    )


def default_usage(limits: SubscriptionLimits, now: datetime | None = None) -> SubscriptionUsage:
    """Usage reported when the counts cannot be loaded: nothing used, full allowance left."""
    now = now or _utc_now()
    return SubscriptionUsage(
        standard_interviews_remaining=UNLIMITED if limits.is_unlimited else limits.standard_interviews,
        advanced_interviews_remaining=UNLIMITED if limits.is_unlimited else limits.advanced_interviews,
        resumes_remaining=UNLIMITED if limits.max_resumes < 0 else limits.max_resumes,
        current_period_start=now,
        current_period_end=now,
    )
