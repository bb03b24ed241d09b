# 📄 File: plantid/modules/subscription_management/domain/repositories/user_usage_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for saving and finding each user's usage record, whether by the app's user id
# or by the Stripe ids attached to it.
# 🧪 Purpose (Technical Summary):
# Repository interface for UserUsage entities following the Repository pattern; the domain depends on
# this abstraction and the infrastructure layer provides the SQLAlchemy implementation.
# 🔗 Dependencies:
# abc, typing, UserUsage domain model
# 🔄 Connected Modules / Calls From:
# usage_service.py, subscription command handlers, user_usage_repository_impl.py

from abc import ABC, abstractmethod
from typing import Optional

from ..models.user_usage import UserUsage


class UserUsageRepository(ABC):
    """
    Repository interface for UserUsage data access.

    One record per user id; ``save`` inserts or updates (last write wins).
    """

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> Optional[UserUsage]:
        """Get the usage record for a user, or None if the user was never seen."""
        pass

    @abstractmethod
    async def get_by_stripe_customer_id(self, customer_id: str) -> Optional[UserUsage]:
        pass

    @abstractmethod
    async def get_by_stripe_subscription_id(self, subscription_id: str) -> Optional[UserUsage]:
        pass

    @abstractmethod
    async def save(self, usage: UserUsage) -> UserUsage:
        """
        Insert or update a usage record.

        Args:
            usage: Record to persist

        Returns:
            UserUsage: The persisted record with its id populated
        """
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Make pending writes durable even if the rest of the request fails."""
        pass
