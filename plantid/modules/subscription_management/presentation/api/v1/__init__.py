# 📄 File: plantid/modules/subscription_management/presentation/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# Version 1 of the usage and subscription endpoints
# 🧪 Purpose (Technical Summary):
# Exports the usage and subscriptions routers for inclusion under /api
# 🔗 Dependencies:
# usage, subscriptions
# 🔄 Connected Modules / Calls From:
# plantid.api.v1.router

from .subscriptions import subscriptions_router
from .usage import usage_router

__all__ = ["subscriptions_router", "usage_router"]
