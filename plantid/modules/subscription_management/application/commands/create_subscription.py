# 📄 File: plantid/modules/subscription_management/application/commands/create_subscription.py
# 🧭 Purpose (Layman Explanation):
# The "start my premium subscription" request: who the user is and, optionally, their email for receipts.
# 🧪 Purpose (Technical Summary):
# CQRS command for creating (or resuming) a Stripe subscription for a user.
# 🔗 Dependencies:
# pydantic, plantid.shared.utils.validators
# 🔄 Connected Modules / Calls From:
# CreateSubscriptionCommandHandler, presentation.api.v1.subscriptions

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from plantid.shared.utils.validators import validate_user_id


class CreateSubscriptionCommand(BaseModel):
    """Command for creating a premium subscription."""

    user_id: str = Field(..., description="Opaque client user id")
    email: Optional[str] = Field(None, max_length=320, description="Billing email passed to Stripe")

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)
