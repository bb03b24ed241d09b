# 📄 File: plantid/modules/subscription_management/domain/services/__init__.py
# 🧭 Purpose (Layman Explanation):
# The business rules for free quotas, trials and premium allowances
# 🧪 Purpose (Technical Summary):
# Exports the pure QuotaService policy engine and the repository-backed UsageService
# 🔗 Dependencies:
# quota_service, usage_service
# 🔄 Connected Modules / Calls From:
# Application handlers in both feature modules

from .quota_service import QuotaDecision, QuotaPolicy, QuotaRefusal, QuotaService
from .usage_service import UsageService

__all__ = [
    "QuotaDecision",
    "QuotaPolicy",
    "QuotaRefusal",
    "QuotaService",
    "UsageService",
]
