# 📄 File: plantid/modules/subscription_management/application/queries/__init__.py
# 🧭 Purpose (Layman Explanation):
# The read requests the subscription feature answers
# 🧪 Purpose (Technical Summary):
# Exports CQRS query definitions
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# Query handlers, presentation routes

from .get_usage import GetUsageQuery

__all__ = ["GetUsageQuery"]
