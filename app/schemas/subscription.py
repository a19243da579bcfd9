from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SubscriptionTier = Literal[
    "bronze",
    "gold",
    "diamond",
    "megastar",
    "free",
    "resume_basic",
    "resume_premium",
    "no_interviews",
]
SubscriptionStatus = Literal["active", "expired", "canceled", "trial", "payment_failed", "suspended"]
SubscriptionType = Literal["interview", "resume"]

SUBSCRIPTION_TIERS: tuple[str, ...] = (
    "bronze",
    "gold",
    "diamond",
    "free",
    "megastar",
    "resume_basic",
    "resume_premium",
    "no_interviews",
)
SUBSCRIPTION_STATUSES: tuple[str, ...] = ("active", "expired", "canceled", "trial", "payment_failed", "suspended")


class SubscriptionLimits(BaseModel):
    standard_interviews: int
    advanced_interviews: int
    resume_downloads: int
    max_resumes: int
    is_unlimited: bool


class SubscriptionFeatures(BaseModel):
    includes_resume: bool
    includes_interviews: bool
    is_interview_unlimited: bool
    max_resume_count: int


class SubscriptionUsage(BaseModel):
    standard_interviews_used: int = 0
    advanced_interviews_used: int = 0
    standard_interviews_remaining: int = 0
    advanced_interviews_remaining: int = 0
    resumes_used: int = 0
    resumes_remaining: int = 0
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    next_reset: datetime | None = None


class Subscription(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    plan_type: str
    payment_status: str
    subscription_type: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    payment_provider_subscription_id: str | None = None


class SubscriptionOverview(BaseModel):
    has_interview_plan: bool = False
    has_resume_plan: bool = False
    interview_plan: Subscription | None = None
    resume_plan: Subscription | None = None
    interview_plan_includes_resume: bool = False


class PeriodRange(BaseModel):
    start: datetime
    end: datetime


class SubscriptionPermissions(BaseModel):
    tier: str
    effective_interview_tier: str
    can_start_standard_interview: bool
    can_start_advanced_interview: bool
    can_download_resume: bool
    can_create_resume: bool
    redundancy_message: str | None = None


class PlanTypeRequest(BaseModel):
    plan_id: str = Field(default="", max_length=200)


class PlanTypeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plan_type: SubscriptionTier | None = Field(default=None, alias="planType")


class ExpiryResult(BaseModel):
    subscription_id: str
    success: bool
    error: str | None = None


class ExpirySweepResponse(BaseModel):
    success: bool
    processed: int
    results: list[ExpiryResult] = Field(default_factory=list)
    timestamp: datetime
