from __future__ import annotations

import logging

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)

_FALLBACK_MARKERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("GOLD",), "gold"),
    (("DIAMOND",), "diamond"),
    (("BRONZE",), "bronze"),
    (("RESUME_BASIC", "RESUMEBASIC"), "resume_basic"),
    (("RESUME_PREMIUM", "RESUMEPREMIUM"), "resume_premium"),
)


def _configured_plan_ids(cfg: Settings) -> list[tuple[str | None, str]]:
    return [
        (cfg.paypal_gold_monthly_plan_id, "gold"),
        (cfg.paypal_gold_yearly_plan_id, "gold"),
        (cfg.paypal_diamond_monthly_plan_id, "diamond"),
        (cfg.paypal_diamond_yearly_plan_id, "diamond"),
        (cfg.paypal_bronze_monthly_plan_id, "bronze"),
        (cfg.paypal_bronze_yearly_plan_id, "bronze"),
        (cfg.paypal_resume_basic_plan_id, "resume_basic"),
        (cfg.paypal_resume_premium_plan_id, "resume_premium"),
    ]


def resolve_plan_type(plan_id: str, cfg: Settings | None = None) -> str | None:
    """Map a payment-provider plan id to a subscription tier.

    Exact matches against the configured plan ids win; otherwise the id is
    searched for a tier marker such as ``GOLD`` or ``RESUME_BASIC``.
    """
    cfg = cfg or settings
    candidate = (plan_id or "").strip()
    if not candidate:
        return None

    for configured, tier in _configured_plan_ids(cfg):
        if configured and candidate == configured:
            logger.info("plan_type_resolved plan_id=%s tier=%s match=exact", candidate, tier)
            return tier

    upper = candidate.upper()
    for markers, tier in _FALLBACK_MARKERS:
        if any(marker in upper for marker in markers):
            logger.info("plan_type_resolved plan_id=%s tier=%s match=marker", candidate, tier)
            return tier

    logger.info("plan_type_unresolved plan_id=%s", candidate)
    return None
