from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.deps import get_supabase
from app.core.errors import DomainError, to_http_exception
from app.core.security import check_cron_key, require_user
from app.integrations.supabase import AuthUser, SupabaseClient
from app.schemas.subscription import (
    ExpirySweepResponse,
    PlanTypeRequest,
    PlanTypeResponse,
    SubscriptionPermissions,
    SubscriptionUsage,
)
from app.services import subscription_service
from app.subscriptions import resolve_plan_type

router = APIRouter()


@router.get("/subscriptions/usage", response_model=SubscriptionUsage)
async def subscription_usage(
    user: AuthUser = Depends(require_user),
    supabase: SupabaseClient = Depends(get_supabase),
):
    try:
        tier = await subscription_service.get_profile_tier(supabase, user.id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return await subscription_service.get_subscription_usage(supabase, user.id, tier)


@router.get("/subscriptions/permissions", response_model=SubscriptionPermissions)
async def subscription_permissions(
    user: AuthUser = Depends(require_user),
    supabase: SupabaseClient = Depends(get_supabase),
):
    try:
        tier = await subscription_service.get_profile_tier(supabase, user.id)
        return await subscription_service.get_permissions(supabase, user.id, tier)
    except DomainError as exc:
        raise to_http_exception(exc) from exc


@router.post("/subscriptions/plan-type", response_model=PlanTypeResponse)
async def plan_type(payload: PlanTypeRequest):
    if not payload.plan_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="plan_id is required")
    return PlanTypeResponse(plan_type=resolve_plan_type(payload.plan_id))


@router.post(
    "/subscriptions/expire",
    response_model=ExpirySweepResponse,
    dependencies=[Depends(check_cron_key)],
)
async def expire_subscriptions(supabase: SupabaseClient = Depends(get_supabase)):
    try:
        return await subscription_service.expire_canceled_subscriptions(supabase)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
