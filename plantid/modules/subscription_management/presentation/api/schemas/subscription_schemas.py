# 📄 File: plantid/modules/subscription_management/presentation/api/schemas/subscription_schemas.py
# 🧭 Purpose (Layman Explanation):
# The shapes of the messages the app sends and receives when checking usage and managing premium.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas (camelCase on the wire) for the usage, subscription and
# Stripe webhook endpoints. The usage payload reuses the UsageSnapshot value object.
#
# 🔗 Dependencies:
# - pydantic (alias generator to_camel)
# - plantid.modules.subscription_management.domain.models.user_usage (UsageSnapshot)
# - plantid.shared.utils.validators (user id validation)
#
# 🔄 Connected Modules / Calls From:
# - plantid.modules.subscription_management.presentation.api.v1.subscriptions
# - plantid.modules.subscription_management.presentation.api.v1.usage

"""
Subscription Management API Schemas

Request Schemas:
- CreateSubscriptionRequest: userId plus optional billing email
- UserIdRequest: body of subscription-success and cancel-subscription

Response Schemas:
- UsageResponse: usage snapshot
- SubscriptionResponse: subscription id, status and payment client secret
- CancelSubscriptionResponse: access end date plus the updated snapshot
- WebhookAckResponse: Stripe delivery acknowledgement
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from plantid.modules.subscription_management.domain.models.user_usage import UsageSnapshot
from plantid.shared.utils.validators import validate_user_id


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# REQUESTS
# =============================================================================

class UserIdRequest(CamelModel):
    """Request body identifying the user."""
    user_id: str = Field(..., description="Opaque client user id")

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)


class CreateSubscriptionRequest(UserIdRequest):
    """Request body for starting a premium subscription."""
    email: Optional[str] = Field(None, max_length=320, description="Billing email")


# =============================================================================
# RESPONSES
# =============================================================================

UsageResponse = UsageSnapshot


class SubscriptionResponse(CamelModel):
    """Subscription ready to be paid by the client with Stripe Elements."""
    subscription_id: str
    client_secret: Optional[str] = None
    status: str


class CancelSubscriptionResponse(CamelModel):
    """Subscription cancelled at period end."""
    canceled: bool = True
    access_until: Optional[datetime] = None
    usage: UsageSnapshot


class WebhookAckResponse(CamelModel):
    received: bool = True
