import dataclasses
import unittest
import sys
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import settings
from app.core.plans import get_plan_value, get_plans_config
from app.schemas.subscription import Subscription
from app.subscriptions import (
    UNLIMITED,
    compute_usage,
    current_month_range,
    default_usage,
    get_redundancy_message,
    get_subscription_features,
    get_subscription_limits,
    has_redundant_subscriptions,
    is_interview_tier,
    resolve_plan_type,
    subscription_period_range,
    tier_includes_resume_features,
)


class PlansConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_plans_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_plan_value("tiers.gold.limits.standard_interviews"), 30)
        self.assertIsNone(get_plan_value("tiers.unknown.limits"))
        self.assertEqual(get_plan_value("tiers.unknown.limits", "fallback"), "fallback")


class LimitsTests(unittest.TestCase):
    def test_tier_limits(self):
        gold = get_subscription_limits("gold")
        self.assertEqual(gold.standard_interviews, 30)
        self.assertEqual(gold.advanced_interviews, 21)
        self.assertEqual(gold.resume_downloads, UNLIMITED)
        self.assertFalse(gold.is_unlimited)
        self.assertTrue(get_subscription_limits("megastar").is_unlimited)
        self.assertEqual(get_subscription_limits("megastar").max_resumes, UNLIMITED)

    def test_unknown_tier_falls_back_to_free(self):
        self.assertEqual(get_subscription_limits("platinum"), get_subscription_limits("free"))
        self.assertEqual(get_subscription_limits(None), get_subscription_limits("free"))
        self.assertEqual(get_subscription_features("platinum"), get_subscription_features("free"))

    def test_features(self):
        self.assertTrue(get_subscription_features("diamond").is_interview_unlimited)
        self.assertFalse(get_subscription_features("resume_basic").includes_interviews)
        self.assertTrue(is_interview_tier("bronze"))
        self.assertFalse(is_interview_tier("resume_premium"))


class PeriodTests(unittest.TestCase):
    def test_calendar_month(self):
        period = current_month_range(datetime(2024, 2, 14, 9, 30, tzinfo=timezone.utc))
        self.assertEqual(period.start, datetime(2024, 2, 1, tzinfo=timezone.utc))
        self.assertEqual(period.end.date().isoformat(), "2024-02-29")
        self.assertEqual((period.end.hour, period.end.minute, period.end.second), (23, 59, 59))

    def test_subscription_without_end_date(self):
        subscription = Subscription(
            id="sub-1",
            user_id="user-1",
            plan_type="gold",
            payment_status="active",
            start_date=datetime(2024, 1, 31, tzinfo=timezone.utc),
        )
        period = subscription_period_range(subscription)
        self.assertEqual(period.start, datetime(2024, 1, 31, tzinfo=timezone.utc))
        self.assertEqual(period.end, datetime(2024, 2, 28, 23, 59, 59, tzinfo=timezone.utc))

    def test_subscription_with_end_date(self):
        subscription = Subscription(
            id="sub-1",
            user_id="user-1",
            plan_type="gold",
            payment_status="active",
            start_date=datetime(2024, 3, 1, tzinfo=timezone.utc),
            end_date=datetime(2024, 4, 1, tzinfo=timezone.utc),
        )
        period = subscription_period_range(subscription)
        self.assertEqual(period.end, datetime(2024, 4, 1, tzinfo=timezone.utc))

    def test_no_subscription_uses_calendar_month(self):
        now = datetime(2024, 5, 10, tzinfo=timezone.utc)
        self.assertEqual(subscription_period_range(None, now), current_month_range(now))


class UsageTests(unittest.TestCase):
    def setUp(self):
        self.period = current_month_range(datetime(2024, 5, 10, tzinfo=timezone.utc))

    def test_remaining_counts(self):
        usage = compute_usage(
            get_subscription_limits("gold"),
            standard_used=3,
            advanced_used=25,
            resumes_used=4,
            period=self.period,
        )
        self.assertEqual(usage.standard_interviews_remaining, 27)
        self.assertEqual(usage.advanced_interviews_remaining, 0)
        self.assertEqual(usage.resumes_remaining, 11)
        self.assertEqual(usage.current_period_start, self.period.start)

    def test_unlimited_tiers(self):
        usage = compute_usage(
            get_subscription_limits("megastar"),
            standard_used=100,
            advanced_used=100,
            resumes_used=100,
            period=self.period,
        )
        self.assertEqual(usage.standard_interviews_remaining, UNLIMITED)
        self.assertEqual(usage.advanced_interviews_remaining, UNLIMITED)
        self.assertEqual(usage.resumes_remaining, UNLIMITED)

    def test_default_usage_reports_full_allowance(self):
        usage = default_usage(get_subscription_limits("bronze"))
        self.assertEqual(usage.standard_interviews_used, 0)
        self.assertEqual(usage.standard_interviews_remaining, 1)
        self.assertEqual(usage.resumes_remaining, 3)


class RedundancyTests(unittest.TestCase):
    def test_resume_inclusive_tiers(self):
        self.assertTrue(tier_includes_resume_features("gold"))
        self.assertTrue(tier_includes_resume_features("megastar"))
        self.assertFalse(tier_includes_resume_features("bronze"))
        self.assertFalse(tier_includes_resume_features(None))

    def test_redundant_pairs(self):
        self.assertTrue(has_redundant_subscriptions("diamond", "resume_basic"))
        self.assertFalse(has_redundant_subscriptions("bronze", "resume_basic"))
        self.assertFalse(has_redundant_subscriptions("gold", "free"))
        self.assertFalse(has_redundant_subscriptions("gold", "resume_premium", "canceled"))

    def test_message(self):
        self.assertEqual(
            get_redundancy_message("gold", "resume_premium", "active"),
            "Your Gold plan already includes resume features. "
            "You don't need to pay for a separate Resume Premium plan.",
        )
        self.assertIn("Resume Basic", get_redundancy_message("diamond", "resume_basic"))
        self.assertIsNone(get_redundancy_message("bronze", "resume_basic"))


class PlanTypeTests(unittest.TestCase):
    def test_exact_configured_match(self):
        cfg = dataclasses.replace(settings, paypal_diamond_yearly_plan_id="P-8XY")
        self.assertEqual(resolve_plan_type("P-8XY", cfg), "diamond")

    def test_marker_fallback(self):
        cfg = dataclasses.replace(settings, paypal_gold_monthly_plan_id=None)
        self.assertEqual(resolve_plan_type("plan-gold-monthly", cfg), "gold")
        self.assertEqual(resolve_plan_type("P-RESUMEPREMIUM-1", cfg), "resume_premium")
        self.assertEqual(resolve_plan_type("bronze_yearly", cfg), "bronze")

    def test_unknown_plan(self):
        self.assertIsNone(resolve_plan_type("P-UNKNOWN", settings))
        self.assertIsNone(resolve_plan_type("", settings))


if __name__ == "__main__":
    unittest.main()
