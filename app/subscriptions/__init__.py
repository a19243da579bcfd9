from .limits import (
    UNLIMITED,
    compute_usage,
    current_month_range,
    default_usage,
    get_subscription_features,
    get_subscription_limits,
    is_interview_tier,
    subscription_period_range,
)
from .plans import resolve_plan_type
from .redundancy import get_redundancy_message, has_redundant_subscriptions, tier_includes_resume_features

__all__ = [
    "UNLIMITED",
    "compute_usage",
    "current_month_range",
    "default_usage",
    "get_subscription_features",
    "get_subscription_limits",
    "is_interview_tier",
    "subscription_period_range",
    "resolve_plan_type",
    "get_redundancy_message",
    "has_redundant_subscriptions",
    "tier_includes_resume_features",
]
