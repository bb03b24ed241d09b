# 📄 File: plantid/modules/subscription_management/domain/services/quota_service.py
# 🧭 Purpose (Layman Explanation):
# The rulebook for how many plants a user may identify: a few free ones per day, a trial window
# after the first use, and a monthly allowance for premium subscribers.
# 🧪 Purpose (Technical Summary):
# Pure domain service implementing the usage quota policy: day/month roll-over, trial latching,
# premium expiry, quota checks with refusal reasons, usage recording and snapshot rendering.
# No I/O; the clock is injectable so every rule is testable against fixed dates.
# 🔗 Dependencies:
# datetime, dataclasses, enum, user_usage domain model, settings (policy construction)
# 🔄 Connected Modules / Calls From:
# usage_service.py (persistence orchestration), plant identification command handler (via usage service)

"""
Usage Quota Policy

One policy reconciles the daily-count, total-count, trial+daily and premium
monthly rules:

- Free users get FREE_DAILY_LIMIT identifications per UTC day.
- The trial starts on the first identification and lasts TRIAL_DAYS days,
  counting the start day as day 1.
- With REQUIRE_SUBSCRIPTION_AFTER_TRIAL, free users outside the trial are
  refused (HTTP 402); otherwise they keep the daily allowance.
- Premium users are not bound by the daily limit; PREMIUM_MONTHLY_LIMIT
  applies per UTC calendar month (0 = unlimited).
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Callable, Optional

from plantid.modules.subscription_management.domain.models.user_usage import UsageSnapshot, UserUsage
from plantid.shared.config.settings import Settings

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuotaRefusal(str, Enum):
    """Reasons an identification can be refused."""
    DAILY_LIMIT = "daily_limit"
    MONTHLY_LIMIT = "monthly_limit"
    TRIAL_EXPIRED = "trial_expired"


@dataclass(frozen=True)
class QuotaPolicy:
    """Quota limits, usually built from settings."""
    free_daily_limit: int = 3
    trial_days: int = 5
    require_subscription_after_trial: bool = False
    premium_monthly_limit: int = 100

    @classmethod
    def from_settings(cls, settings: Settings) -> "QuotaPolicy":
        return cls(
            free_daily_limit=settings.FREE_DAILY_LIMIT,
            trial_days=settings.TRIAL_DAYS,
            require_subscription_after_trial=settings.REQUIRE_SUBSCRIPTION_AFTER_TRIAL,
            premium_monthly_limit=settings.PREMIUM_MONTHLY_LIMIT,
        )


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of a quota check."""
    allowed: bool
    reason: Optional[QuotaRefusal] = None
    limit: Optional[int] = None
    message: Optional[str] = None


ALLOWED = QuotaDecision(allowed=True)


class QuotaService:
    """
    Applies the quota policy to UserUsage records.

    All methods take the record explicitly; only ``roll_over`` and
    ``record_identification`` mutate it. ``check`` and ``snapshot`` work on a
    rolled-over copy so reading usage never changes what is stored.
    """

    def __init__(self, policy: QuotaPolicy, clock: Callable[[], datetime] = utc_now):
        self.policy = policy
        self._clock = clock

    # ===== CALENDAR =====

    def now(self) -> datetime:
        return self._clock()

    def today(self, now: Optional[datetime] = None) -> str:
        return (now or self.now()).date().isoformat()

    def current_month(self, now: Optional[datetime] = None) -> str:
        return (now or self.now()).strftime("%Y-%m")

    # ===== TRIAL =====

    def trial_days_elapsed(self, usage: UserUsage, now: Optional[datetime] = None) -> Optional[int]:
        """Day number of the trial (start day = 1), or None when no trial started."""
        if not usage.trial_start_date:
            return None
        start = date.fromisoformat(usage.trial_start_date)
        return ((now or self.now()).date() - start).days + 1

    def in_trial(self, usage: Optional[UserUsage], now: Optional[datetime] = None) -> bool:
        if self.policy.trial_days <= 0:
            return False
        if usage is None:
            # The trial starts with the first identification
            return True
        if usage.trial_expired:
            return False
        elapsed = self.trial_days_elapsed(usage, now)
        return elapsed is not None and elapsed <= self.policy.trial_days

    def trial_days_remaining(self, usage: Optional[UserUsage], now: Optional[datetime] = None) -> int:
        if not self.in_trial(usage, now):
            return 0
        if usage is None:
            return self.policy.trial_days
        return max(0, self.policy.trial_days - self.trial_days_elapsed(usage, now) + 1)

    # ===== ROLL-OVER =====

    def roll_over(self, usage: UserUsage, now: Optional[datetime] = None) -> UserUsage:
        """
        Bring a record up to date with the calendar.

        - New UTC day: daily_count resets.
        - premium_expires_at passed: premium is dropped.
        - New UTC month while premium: premium_monthly_count resets.
        - Trial window passed: trial_expired latches.

        Args:
            usage: Record to update in place
            now: Reference time (defaults to the service clock)

        Returns:
            UserUsage: The same record
        """
        now = now or self.now()
        today = self.today(now)

        if usage.last_reset_date != today:
            usage.daily_count = 0
            usage.last_reset_date = today

        if usage.is_premium and usage.premium_expires_at is not None:
            expires_at = usage.premium_expires_at
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            if now >= expires_at:
                logger.info(f"Premium access ended for user {usage.user_id}")
                usage.is_premium = False
                usage.premium_expires_at = None

        month = self.current_month(now)
        if usage.is_premium and usage.premium_period != month:
            usage.premium_monthly_count = 0
            usage.premium_period = month

        if (
            not usage.trial_expired
            and usage.trial_start_date
            and not self._within_trial_window(usage, now)
        ):
            usage.trial_expired = True

        return usage

    def _within_trial_window(self, usage: UserUsage, now: datetime) -> bool:
        elapsed = self.trial_days_elapsed(usage, now)
        return elapsed is not None and elapsed <= self.policy.trial_days

    def current_view(self, usage: UserUsage, now: Optional[datetime] = None) -> UserUsage:
        """Rolled-over copy of a record, leaving the original untouched."""
        return self.roll_over(usage.model_copy(deep=True), now)

    # ===== CHECK =====

    def check(self, usage: Optional[UserUsage], now: Optional[datetime] = None) -> QuotaDecision:
        """
        Decide whether one more identification is allowed.

        Args:
            usage: Stored record, or None for a user never seen before

        Returns:
            QuotaDecision: allowed, or refused with a reason and message
        """
        if usage is None:
            return ALLOWED

        now = now or self.now()
        view = self.current_view(usage, now)

        if view.is_premium:
            limit = self.policy.premium_monthly_limit
            if limit > 0 and view.premium_monthly_count >= limit:
                return QuotaDecision(
                    allowed=False,
                    reason=QuotaRefusal.MONTHLY_LIMIT,
                    limit=limit,
                    message=(
                        f"You have reached your monthly limit of {limit} premium identifications. "
                        "Your allowance resets at the start of next month."
                    ),
                )
            return ALLOWED

        if self.policy.require_subscription_after_trial and not self.in_trial(view, now):
            return QuotaDecision(
                allowed=False,
                reason=QuotaRefusal.TRIAL_EXPIRED,
                message="Your free trial has ended. Subscribe to premium to keep identifying plants.",
            )

        limit = self.policy.free_daily_limit
        if view.daily_count >= limit:
            return QuotaDecision(
                allowed=False,
                reason=QuotaRefusal.DAILY_LIMIT,
                limit=limit,
                message=(
                    f"You have reached your daily limit of {limit} free identifications. "
                    "Upgrade to premium for unlimited access."
                ),
            )

        return ALLOWED

    # ===== RECORD =====

    def record_identification(
        self,
        usage: Optional[UserUsage],
        user_id: str,
        now: Optional[datetime] = None
    ) -> UserUsage:
        """
        Count one successful identification.

        Creates the record (starting the trial) on first use, rolls it over,
        then increments the daily, total and (for premium) monthly counters.
        """
        now = now or self.now()

        if usage is None:
            usage = UserUsage.start(user_id, self.today(now))

        self.roll_over(usage, now)

        usage.daily_count += 1
        usage.total_count += 1
        if usage.is_premium:
            usage.premium_monthly_count += 1
        usage.touch()

        return usage

    # ===== SNAPSHOT =====

    def snapshot(self, usage: Optional[UserUsage], now: Optional[datetime] = None) -> UsageSnapshot:
        """
        Render the public usage view without mutating the record.

        A stale last_reset_date reads as dailyCount 0.
        """
        now = now or self.now()
        premium_limit = self.policy.premium_monthly_limit or None

        if usage is None:
            return UsageSnapshot(
                daily_count=0,
                total_count=0,
                is_premium=False,
                remaining_free=self.policy.free_daily_limit,
                daily_limit=self.policy.free_daily_limit,
                in_trial=self.in_trial(None, now),
                trial_days_remaining=self.trial_days_remaining(None, now),
                premium_monthly_limit=premium_limit,
            )

        view = self.current_view(usage, now)

        if view.is_premium:
            remaining_free = None
        elif self.policy.require_subscription_after_trial and not self.in_trial(view, now):
            remaining_free = 0
        else:
            remaining_free = max(0, self.policy.free_daily_limit - view.daily_count)

        return UsageSnapshot(
            daily_count=view.daily_count,
            total_count=view.total_count,
            is_premium=view.is_premium,
            remaining_free=remaining_free,
            daily_limit=self.policy.free_daily_limit,
            in_trial=self.in_trial(view, now),
            trial_days_remaining=self.trial_days_remaining(view, now),
            premium_monthly_count=view.premium_monthly_count if view.is_premium else 0,
            premium_monthly_limit=premium_limit,
            subscription_status=view.subscription_status,
        )
