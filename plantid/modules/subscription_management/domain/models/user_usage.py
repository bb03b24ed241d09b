# 📄 File: plantid/modules/subscription_management/domain/models/user_usage.py
# 🧭 Purpose (Layman Explanation):
# Describes what we remember about each user's usage: how many photos they identified today and in total,
# whether they are premium, when their trial started, and which Stripe subscription belongs to them.
# 🧪 Purpose (Technical Summary):
# Domain model for the UserUsage record with premium lifecycle transitions, plus the public
# UsageSnapshot value object returned by usage, identify and subscription endpoints (camelCase JSON).
# 🔗 Dependencies:
# pydantic, datetime, typing, enum
# 🔄 Connected Modules / Calls From:
# quota_service.py, usage_service.py, repository implementation, subscription command handlers

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SubscriptionStatus(str, Enum):
    """Stripe subscription statuses we act on."""
    ACTIVE = "active"
    TRIALING = "trialing"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    PAST_DUE = "past_due"
    UNPAID = "unpaid"
    CANCELED = "canceled"
    PAUSED = "paused"

    @classmethod
    def grants_premium(cls, status: Optional[str]) -> bool:
        """Only active and trialing subscriptions unlock premium use."""
        return status in (cls.ACTIVE.value, cls.TRIALING.value)


class UserUsage(BaseModel):
    """
    Usage record for one user.

    Counters:
    - daily_count applies to last_reset_date (YYYY-MM-DD, UTC)
    - premium_monthly_count applies to premium_period (YYYY-MM, UTC)
    - total_count never resets

    Premium:
    - is_premium is granted by a confirmed Stripe subscription
    - premium_expires_at is set when the subscription is cancelled at period end
    """

    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    id: Optional[int] = None
    user_id: str

    daily_count: int = Field(default=0, ge=0)
    last_reset_date: str
    total_count: int = Field(default=0, ge=0)

    is_premium: bool = False
    premium_monthly_count: int = Field(default=0, ge=0)
    premium_period: Optional[str] = None
    premium_expires_at: Optional[datetime] = None

    trial_start_date: Optional[str] = None
    trial_expired: bool = False

    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    subscription_status: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def start(cls, user_id: str, today: str) -> "UserUsage":
        """
        Create the record for a user's first identification.
        The trial window starts today.
        """
        return cls(
            user_id=user_id,
            last_reset_date=today,
            trial_start_date=today,
        )

    # Premium lifecycle

    def grant_premium(self, month: str, status: Optional[str] = None) -> None:
        """Unlock premium; the monthly counter only restarts in a new month."""
        if self.premium_period != month:
            self.premium_monthly_count = 0
            self.premium_period = month
        self.is_premium = True
        self.premium_expires_at = None
        if status:
            self.subscription_status = status
        self.touch()

    def schedule_premium_end(self, access_until: Optional[datetime], status: Optional[str] = None) -> None:
        """Keep premium until the paid period ends; revoke now if the end is unknown."""
        if access_until is None:
            self.revoke_premium(status)
            return
        self.premium_expires_at = access_until
        if status:
            self.subscription_status = status
        self.touch()

    def revoke_premium(self, status: Optional[str] = None) -> None:
        self.is_premium = False
        self.premium_expires_at = None
        if status:
            self.subscription_status = status
        self.touch()

    def attach_stripe(self, customer_id: Optional[str] = None, subscription_id: Optional[str] = None,
                      status: Optional[str] = None) -> None:
        if customer_id:
            self.stripe_customer_id = customer_id
        if subscription_id:
            self.stripe_subscription_id = subscription_id
        if status:
            self.subscription_status = status
        self.touch()

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)


class UsageSnapshot(BaseModel):
    """
    Public view of a user's usage.

    remaining_free is None for premium users.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    daily_count: int = 0
    total_count: int = 0
    is_premium: bool = False
    remaining_free: Optional[int] = None
    daily_limit: int
    in_trial: bool = False
    trial_days_remaining: int = 0
    premium_monthly_count: int = 0
    premium_monthly_limit: Optional[int] = None
    subscription_status: Optional[str] = None
