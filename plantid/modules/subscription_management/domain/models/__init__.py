# 📄 File: plantid/modules/subscription_management/domain/models/__init__.py
# 🧭 Purpose (Layman Explanation):
# The core objects describing a user's usage and subscription state
# 🧪 Purpose (Technical Summary):
# Package initialization exporting the UserUsage entity, the UsageSnapshot value object
# and the SubscriptionStatus enum
# 🔗 Dependencies:
# user_usage
# 🔄 Connected Modules / Calls From:
# Domain services, repositories, application handlers, presentation schemas

from .user_usage import SubscriptionStatus, UsageSnapshot, UserUsage

__all__ = [
    "SubscriptionStatus",
    "UsageSnapshot",
    "UserUsage",
]
