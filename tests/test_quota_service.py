"""Quota policy rules against a fixed clock."""

from datetime import datetime, timezone

import pytest

from plantid.modules.subscription_management.domain.models.user_usage import UserUsage
from plantid.modules.subscription_management.domain.services.quota_service import (
    QuotaPolicy,
    QuotaRefusal,
    QuotaService,
)


def at(year, month, day, hour=12):
    return datetime(year, month, day, hour, 0, tzinfo=timezone.utc)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return Clock(at(2026, 3, 10))


@pytest.fixture
def quota(clock):
    return QuotaService(QuotaPolicy(), clock=clock)


def used(quota, user_id="user-1", times=1, usage=None):
    for _ in range(times):
        usage = quota.record_identification(usage, user_id)
    return usage


class TestFreeDailyLimit:
    def test_unknown_user_is_allowed(self, quota):
        assert quota.check(None).allowed

    def test_first_identification_starts_record_and_trial(self, quota):
        usage = used(quota)

        assert usage.daily_count == 1
        assert usage.total_count == 1
        assert usage.last_reset_date == "2026-03-10"
        assert usage.trial_start_date == "2026-03-10"

    def test_refused_after_daily_limit(self, quota):
        usage = used(quota, times=3)

        decision = quota.check(usage)

        assert not decision.allowed
        assert decision.reason == QuotaRefusal.DAILY_LIMIT
        assert decision.limit == 3
        assert "daily limit of 3" in decision.message

    def test_new_day_resets_without_mutating_record(self, quota, clock):
        usage = used(quota, times=3)
        clock.now = at(2026, 3, 11, 0)

        assert quota.check(usage).allowed
        assert quota.snapshot(usage).daily_count == 0
        assert usage.daily_count == 3

    def test_recording_on_new_day_restarts_daily_count(self, quota, clock):
        usage = used(quota, times=3)
        clock.now = at(2026, 3, 11)

        usage = used(quota, usage=usage)

        assert usage.daily_count == 1
        assert usage.total_count == 4
        assert usage.last_reset_date == "2026-03-11"


class TestTrial:
    def test_start_day_counts_as_day_one(self, quota, clock):
        usage = used(quota)

        assert quota.trial_days_remaining(usage) == 5
        clock.now = at(2026, 3, 14)
        assert quota.in_trial(usage)
        assert quota.trial_days_remaining(usage) == 1

    def test_trial_ends_after_configured_days(self, quota, clock):
        usage = used(quota)
        clock.now = at(2026, 3, 15)

        assert not quota.in_trial(usage)
        assert quota.trial_days_remaining(usage) == 0

    def test_roll_over_latches_trial_expiry(self, quota, clock):
        usage = used(quota)
        clock.now = at(2026, 3, 20)
        quota.roll_over(usage)

        # Even a clock moved backwards does not reopen the trial
        clock.now = at(2026, 3, 11)
        assert usage.trial_expired
        assert not quota.in_trial(usage)

    def test_free_use_continues_after_trial_by_default(self, quota, clock):
        usage = used(quota)
        clock.now = at(2026, 4, 1)

        assert quota.check(usage).allowed
        assert quota.snapshot(usage).remaining_free == 3

    def test_subscription_required_after_trial(self, clock):
        quota = QuotaService(QuotaPolicy(require_subscription_after_trial=True), clock=clock)
        usage = used(quota)
        clock.now = at(2026, 3, 15)

        decision = quota.check(usage)

        assert decision.reason == QuotaRefusal.TRIAL_EXPIRED
        assert quota.snapshot(usage).remaining_free == 0

    def test_no_trial_when_disabled(self, clock):
        quota = QuotaService(QuotaPolicy(trial_days=0), clock=clock)

        assert not quota.in_trial(None)
        assert not quota.in_trial(used(quota))


class TestPremium:
    def test_premium_ignores_daily_limit(self, quota):
        usage = used(quota, times=3)
        usage.grant_premium(quota.current_month())

        assert quota.check(usage).allowed

    def test_premium_counts_monthly_usage(self, quota):
        usage = used(quota)
        usage.grant_premium(quota.current_month())

        usage = used(quota, usage=usage, times=2)

        assert usage.premium_monthly_count == 2
        assert usage.daily_count == 3

    def test_premium_monthly_limit(self, quota):
        usage = used(quota)
        usage.grant_premium("2026-03")
        usage.premium_monthly_count = 100

        decision = quota.check(usage)

        assert decision.reason == QuotaRefusal.MONTHLY_LIMIT
        assert decision.limit == 100

    def test_new_month_resets_premium_count(self, quota, clock):
        usage = used(quota)
        usage.grant_premium("2026-03")
        usage.premium_monthly_count = 100
        clock.now = at(2026, 4, 1, 0)

        assert quota.check(usage).allowed
        assert quota.snapshot(usage).premium_monthly_count == 0

    def test_regrant_in_same_month_keeps_count(self, quota):
        usage = used(quota)
        usage.grant_premium("2026-03")
        usage.premium_monthly_count = 7

        usage.grant_premium("2026-03")

        assert usage.premium_monthly_count == 7

    def test_unlimited_when_monthly_limit_is_zero(self, clock):
        quota = QuotaService(QuotaPolicy(premium_monthly_limit=0), clock=clock)
        usage = used(quota)
        usage.grant_premium("2026-03")
        usage.premium_monthly_count = 10_000

        assert quota.check(usage).allowed
        assert quota.snapshot(usage).premium_monthly_limit is None

    def test_premium_lapses_at_expiry(self, quota, clock):
        usage = used(quota, times=3)
        usage.grant_premium("2026-03")
        usage.schedule_premium_end(at(2026, 3, 12))

        clock.now = at(2026, 3, 11)
        assert quota.snapshot(usage).is_premium

        clock.now = at(2026, 3, 12, 13)
        quota.roll_over(usage)
        assert not usage.is_premium
        assert usage.premium_expires_at is None

    def test_naive_expiry_is_treated_as_utc(self, quota, clock):
        usage = used(quota)
        usage.grant_premium("2026-03")
        usage.schedule_premium_end(datetime(2026, 3, 10, 11, 0))

        assert not quota.snapshot(usage).is_premium


class TestSnapshot:
    def test_default_snapshot_for_unknown_user(self, quota):
        snapshot = quota.snapshot(None)

        assert snapshot.model_dump(by_alias=True) == {
            "dailyCount": 0,
            "totalCount": 0,
            "isPremium": False,
            "remainingFree": 3,
            "dailyLimit": 3,
            "inTrial": True,
            "trialDaysRemaining": 5,
            "premiumMonthlyCount": 0,
            "premiumMonthlyLimit": 100,
            "subscriptionStatus": None,
        }

    def test_remaining_free_counts_down(self, quota):
        assert quota.snapshot(used(quota, times=2)).remaining_free == 1
        assert quota.snapshot(used(quota, times=5)).remaining_free == 0

    def test_premium_has_no_remaining_free(self, quota):
        usage = used(quota)
        usage.grant_premium("2026-03", status="active")

        snapshot = quota.snapshot(usage)

        assert snapshot.is_premium
        assert snapshot.remaining_free is None
        assert snapshot.subscription_status == "active"


def test_policy_from_settings():
    from plantid.shared.config.settings import Settings

    settings = Settings(FREE_DAILY_LIMIT=5, TRIAL_DAYS=7, REQUIRE_SUBSCRIPTION_AFTER_TRIAL=True, PREMIUM_MONTHLY_LIMIT=0)

    policy = QuotaPolicy.from_settings(settings)

    assert policy == QuotaPolicy(
        free_daily_limit=5,
        trial_days=7,
        require_subscription_after_trial=True,
        premium_monthly_limit=0,
    )


def test_usage_start_sets_trial():
    usage = UserUsage.start("u", "2026-01-01")

    assert usage.trial_start_date == usage.last_reset_date == "2026-01-01"
    assert not usage.is_premium
