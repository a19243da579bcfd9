from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    supabase_url: str | None
    supabase_service_role_key: str | None
    supabase_timeout_s: float
    cron_api_key: str | None
    expiry_sweep_enabled: bool
    expiry_sweep_interval_s: int
    temp_resume_ttl_hours: int
    paypal_gold_monthly_plan_id: str | None
    paypal_gold_yearly_plan_id: str | None
    paypal_diamond_monthly_plan_id: str | None
    paypal_diamond_yearly_plan_id: str | None
    paypal_bronze_monthly_plan_id: str | None
    paypal_bronze_yearly_plan_id: str | None
    paypal_resume_basic_plan_id: str | None
    paypal_resume_premium_plan_id: str | None

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)


settings = Settings(
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://localhost:3000",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    supabase_url=(_get_env("SUPABASE_URL") or "").rstrip("/") or None,
    supabase_service_role_key=_get_env("SUPABASE_SERVICE_ROLE_KEY"),
    supabase_timeout_s=_get_env_float("SUPABASE_TIMEOUT_S", 10.0),
    cron_api_key=_get_env("CRON_API_KEY"),
    expiry_sweep_enabled=_get_env_bool("EXPIRY_SWEEP_ENABLED", False),
    expiry_sweep_interval_s=_get_env_int("EXPIRY_SWEEP_INTERVAL_S", 3600),
    temp_resume_ttl_hours=_get_env_int("TEMP_RESUME_TTL_HOURS", 24),
    paypal_gold_monthly_plan_id=_get_env("PAYPAL_GOLD_MONTHLY_PLAN_ID"),
    paypal_gold_yearly_plan_id=_get_env("PAYPAL_GOLD_YEARLY_PLAN_ID"),
    paypal_diamond_monthly_plan_id=_get_env("PAYPAL_DIAMOND_MONTHLY_PLAN_ID"),
    paypal_diamond_yearly_plan_id=_get_env("PAYPAL_DIAMOND_YEARLY_PLAN_ID"),
    paypal_bronze_monthly_plan_id=_get_env("PAYPAL_BRONZE_MONTHLY_PLAN_ID"),
    paypal_bronze_yearly_plan_id=_get_env("PAYPAL_BRONZE_YEARLY_PLAN_ID"),
    paypal_resume_basic_plan_id=_get_env("PAYPAL_RESUME_BASIC_PLAN_ID"),
    paypal_resume_premium_plan_id=_get_env("PAYPAL_RESUME_PREMIUM_PLAN_ID"),
)

if settings.expiry_sweep_enabled and settings.expiry_sweep_interval_s < 60:
    raise RuntimeError("EXPIRY_SWEEP_INTERVAL_S must be at least 60 seconds.")

if settings.expiry_sweep_enabled and not settings.supabase_configured:
    raise RuntimeError("EXPIRY_SWEEP_ENABLED requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY.")
