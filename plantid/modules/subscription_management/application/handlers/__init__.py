# 📄 File: plantid/modules/subscription_management/application/handlers/__init__.py
# 🧭 Purpose (Layman Explanation):
# The workers that carry out subscription requests
# 🧪 Purpose (Technical Summary):
# Exports CQRS command and query handlers
# 🔗 Dependencies:
# command_handlers, query_handlers
# 🔄 Connected Modules / Calls From:
# Presentation dependencies and routes

from .command_handlers import (
    CancellationResult,
    CancelSubscriptionCommandHandler,
    ConfirmSubscriptionCommandHandler,
    CreateSubscriptionCommandHandler,
    ProcessStripeWebhookCommandHandler,
)
from .query_handlers import GetUsageQueryHandler

__all__ = [
    "CancellationResult",
    "CancelSubscriptionCommandHandler",
    "ConfirmSubscriptionCommandHandler",
    "CreateSubscriptionCommandHandler",
    "ProcessStripeWebhookCommandHandler",
    "GetUsageQueryHandler",
]
