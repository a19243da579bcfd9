from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_PLANS_CONFIG_CACHE: dict[str, Any] | None = None
_PLANS_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "plans.yaml"


def get_plans_config() -> dict[str, Any]:
    """Load plan limits from repo-level config/plans.yaml and cache it."""
    global _PLANS_CONFIG_CACHE

    if _PLANS_CONFIG_CACHE is not None:
        return _PLANS_CONFIG_CACHE

    if not _PLANS_CONFIG_PATH.exists():
        raise RuntimeError(
            f"Plans config not found at '{_PLANS_CONFIG_PATH}'. "
            "Expected file: config/plans.yaml"
        )

    try:
        raw = _PLANS_CONFIG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read plans config '{_PLANS_CONFIG_PATH}': {exc}"
        ) from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(
            f"Invalid YAML in plans config '{_PLANS_CONFIG_PATH}': {exc}"
        ) from exc

    if not isinstance(parsed, dict) or not isinstance(parsed.get("tiers"), dict):
        raise RuntimeError(
            f"Invalid plans config '{_PLANS_CONFIG_PATH}': expected a top-level 'tiers' mapping."
        )

    _PLANS_CONFIG_CACHE = parsed
    return _PLANS_CONFIG_CACHE


def get_plan_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'tiers.gold.limits.max_resumes'."""
    if not path:
        return default

    current: Any = get_plans_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current
