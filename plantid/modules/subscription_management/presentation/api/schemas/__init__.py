# 📄 File: plantid/modules/subscription_management/presentation/api/schemas/__init__.py
# 🧭 Purpose (Layman Explanation):
# Message formats for usage and subscription endpoints
# 🧪 Purpose (Technical Summary):
# Exports the subscription API schemas
# 🔗 Dependencies:
# subscription_schemas
# 🔄 Connected Modules / Calls From:
# presentation.api.v1 routes

from .subscription_schemas import (
    CancelSubscriptionResponse,
    CreateSubscriptionRequest,
    SubscriptionResponse,
    UsageResponse,
    UserIdRequest,
    WebhookAckResponse,
)

__all__ = [
    "CancelSubscriptionResponse",
    "CreateSubscriptionRequest",
    "SubscriptionResponse",
    "UsageResponse",
    "UserIdRequest",
    "WebhookAckResponse",
]
