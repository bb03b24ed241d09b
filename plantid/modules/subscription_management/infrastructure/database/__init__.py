# 📄 File: plantid/modules/subscription_management/infrastructure/database/__init__.py
# 🧭 Purpose (Layman Explanation):
# Database storage for usage records
# 🧪 Purpose (Technical Summary):
# Exports the UserUsage ORM model and its SQLAlchemy repository implementation
# 🔗 Dependencies:
# models, user_usage_repository_impl
# 🔄 Connected Modules / Calls From:
# presentation.dependencies, DatabaseConnectionManager.create_tables

from .models import UserUsageModel
from .user_usage_repository_impl import UserUsageRepositoryImpl

__all__ = ["UserUsageModel", "UserUsageRepositoryImpl"]
