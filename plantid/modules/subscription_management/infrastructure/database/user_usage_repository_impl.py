# 📄 File: plantid/modules/subscription_management/infrastructure/database/user_usage_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Does the actual database reading and writing of each user's usage record.
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of UserUsageRepository: lookups by user id / Stripe ids and upsert-style
# save that maps between the UserUsage domain model and UserUsageModel rows.
# 🔗 Dependencies:
# SQLAlchemy async session, UserUsageModel, UserUsage, plantid.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# subscription_management.presentation.dependencies (repository provider), UsageService

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from plantid.modules.subscription_management.domain.models.user_usage import UserUsage
from plantid.modules.subscription_management.domain.repositories.user_usage_repository import UserUsageRepository
from plantid.modules.subscription_management.infrastructure.database.models import UserUsageModel
from plantid.shared.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

# Columns copied between the domain model and the row on save
_PERSISTED_FIELDS = (
    "user_id",
    "daily_count",
    "last_reset_date",
    "total_count",
    "is_premium",
    "premium_monthly_count",
    "premium_period",
    "premium_expires_at",
    "trial_start_date",
    "trial_expired",
    "stripe_customer_id",
    "stripe_subscription_id",
    "subscription_status",
    "updated_at",
)


class UserUsageRepositoryImpl(UserUsageRepository):
    """
    SQLAlchemy implementation of the usage repository.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, **criteria) -> Optional[UserUsageModel]:
        column, value = next(iter(criteria.items()))
        try:
            result = await self.session.execute(
                select(UserUsageModel).where(getattr(UserUsageModel, column) == value)
            )
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching usage by {column}={value}: {e}")
            raise DatabaseError(f"Failed to fetch usage record: {e}", operation="select", table="user_usage")

    async def get_by_user_id(self, user_id: str) -> Optional[UserUsage]:
        model = await self._get_model(user_id=user_id)
        return UserUsage.model_validate(model) if model else None

    async def get_by_stripe_customer_id(self, customer_id: str) -> Optional[UserUsage]:
        model = await self._get_model(stripe_customer_id=customer_id)
        return UserUsage.model_validate(model) if model else None

    async def get_by_stripe_subscription_id(self, subscription_id: str) -> Optional[UserUsage]:
        model = await self._get_model(stripe_subscription_id=subscription_id)
        return UserUsage.model_validate(model) if model else None

    async def save(self, usage: UserUsage) -> UserUsage:
        """
        Insert the record or update the existing row for the same user.

        Args:
            usage: Domain record to persist

        Returns:
            UserUsage: Persisted record with id populated

        Raises:
            DatabaseError: If the write fails
        """
        try:
            model = await self._get_model(user_id=usage.user_id)
            if model is None:
                model = UserUsageModel(created_at=usage.created_at)
                self.session.add(model)

            for field_name in _PERSISTED_FIELDS:
                setattr(model, field_name, getattr(usage, field_name))

            await self.session.flush()  # Get the generated ID
            await self.session.refresh(model)

            logger.debug(f"Saved usage for user {usage.user_id} (daily={model.daily_count}, total={model.total_count})")
            return UserUsage.model_validate(model)

        except SQLAlchemyError as e:
            logger.error(f"Error saving usage for user {usage.user_id}: {e}")
            raise DatabaseError(f"Failed to save usage record: {e}", operation="upsert", table="user_usage")

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"❌ Commit failed for usage records: {e}")
            raise DatabaseError(f"Failed to commit usage record: {e}", operation="commit", table="user_usage")
