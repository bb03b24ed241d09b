# 📄 File: plantid/modules/subscription_management/domain/services/usage_service.py
# 🧭 Purpose (Layman Explanation):
# Looks up a user's usage, says "no" when they've used up their free identifications,
# and counts each successful identification.
# 🧪 Purpose (Technical Summary):
# Domain service combining the UserUsageRepository with the QuotaService: quota enforcement with
# typed refusals (429 / 402), usage recording after successful identifications, snapshot reads.
# 🔗 Dependencies:
# quota_service, user_usage_repository, plantid.shared.core.exceptions, plantid.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# IdentifyPlantCommandHandler, GetUsageQueryHandler, subscription command handlers

from typing import Optional

from plantid.modules.subscription_management.domain.models.user_usage import UsageSnapshot, UserUsage
from plantid.modules.subscription_management.domain.repositories.user_usage_repository import UserUsageRepository
from plantid.modules.subscription_management.domain.services.quota_service import QuotaRefusal, QuotaService
from plantid.shared.core.exceptions import SubscriptionError, UsageLimitExceededError
from plantid.shared.utils.logging import get_logger

logger = get_logger(__name__)


class UsageService:
    """
    Usage quota enforcement backed by a repository.
    """

    def __init__(self, repository: UserUsageRepository, quota_service: QuotaService):
        self.repository = repository
        self.quota = quota_service

    async def get(self, user_id: str) -> Optional[UserUsage]:
        return await self.repository.get_by_user_id(user_id)

    async def get_or_create(self, user_id: str) -> UserUsage:
        """Fetch the user's record, creating it (and starting the trial) if missing."""
        usage = await self.repository.get_by_user_id(user_id)
        if usage is None:
            usage = UserUsage.start(user_id, self.quota.today())
            usage = await self.repository.save(usage)
            logger.info(f"Created usage record for user {user_id}")
        return usage

    async def save(self, usage: UserUsage, commit: bool = False) -> UserUsage:
        usage = await self.repository.save(usage)
        if commit:
            await self.repository.commit()
        return usage

    async def find_by_stripe_ids(
        self,
        subscription_id: Optional[str] = None,
        customer_id: Optional[str] = None
    ) -> Optional[UserUsage]:
        """Find the record linked to a Stripe subscription, falling back to the customer."""
        usage = None
        if subscription_id:
            usage = await self.repository.get_by_stripe_subscription_id(subscription_id)
        if usage is None and customer_id:
            usage = await self.repository.get_by_stripe_customer_id(customer_id)
        return usage

    def current_month(self) -> str:
        return self.quota.current_month()

    async def check_quota(self, user_id: str) -> None:
        """
        Refuse the request if the user has no identifications left.

        Raises:
            UsageLimitExceededError: Daily or monthly limit reached (429)
            SubscriptionError: Trial over and a subscription is required (402)
        """
        usage = await self.repository.get_by_user_id(user_id)
        decision = self.quota.check(usage)
        if decision.allowed:
            return

        logger.log_business_event(
            "quota_refused",
            f"Identification refused: {decision.reason.value}",
            user_id=user_id,
            extra={"reason": decision.reason.value, "limit": decision.limit},
        )

        if decision.reason == QuotaRefusal.TRIAL_EXPIRED:
            raise SubscriptionError(
                decision.message,
                user_id=user_id,
                subscription_status=usage.subscription_status if usage else None,
                reason=decision.reason.value,
            )

        raise UsageLimitExceededError(
            decision.message,
            user_id=user_id,
            limit=decision.limit,
            reason=decision.reason.value,
            usage=self.quota.snapshot(usage).model_dump(by_alias=True),
        )

    async def record_identification(self, user_id: str) -> UsageSnapshot:
        """Count one successful identification and return the updated snapshot."""
        usage = await self.repository.get_by_user_id(user_id)
        usage = self.quota.record_identification(usage, user_id)
        usage = await self.repository.save(usage)
        return self.quota.snapshot(usage)

    async def snapshot(self, user_id: str) -> UsageSnapshot:
        usage = await self.repository.get_by_user_id(user_id)
        return self.quota.snapshot(usage)

    def snapshot_of(self, usage: Optional[UserUsage]) -> UsageSnapshot:
        return self.quota.snapshot(usage)
