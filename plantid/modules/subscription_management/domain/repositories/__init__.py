# 📄 File: plantid/modules/subscription_management/domain/repositories/__init__.py
# 🧭 Purpose (Layman Explanation):
# Collects the data access contracts for usage records
# 🧪 Purpose (Technical Summary):
# Package initialization exporting repository interfaces for dependency inversion
# 🔗 Dependencies:
# user_usage_repository
# 🔄 Connected Modules / Calls From:
# Domain services, infrastructure implementations

from .user_usage_repository import UserUsageRepository

__all__ = ["UserUsageRepository"]
