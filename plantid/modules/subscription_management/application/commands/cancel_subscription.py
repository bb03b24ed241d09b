# 📄 File: plantid/modules/subscription_management/application/commands/cancel_subscription.py
# 🧭 Purpose (Layman Explanation):
# The "stop renewing my premium" request. Premium stays on until the month already paid for ends.
# 🧪 Purpose (Technical Summary):
# CQRS command cancelling a Stripe subscription at period end.
# 🔗 Dependencies:
# pydantic, plantid.shared.utils.validators
# 🔄 Connected Modules / Calls From:
# CancelSubscriptionCommandHandler, presentation.api.v1.subscriptions

from pydantic import BaseModel, field_validator

from plantid.shared.utils.validators import validate_user_id


class CancelSubscriptionCommand(BaseModel):
    """Command for cancelling a subscription at the end of the paid period."""

    user_id: str

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)
