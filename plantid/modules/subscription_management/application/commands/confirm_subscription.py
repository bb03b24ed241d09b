# 📄 File: plantid/modules/subscription_management/application/commands/confirm_subscription.py
# 🧭 Purpose (Layman Explanation):
# Sent by the app after payment went through, asking us to switch the user to premium.
# 🧪 Purpose (Technical Summary):
# CQRS command confirming a subscription; the handler verifies the status with Stripe before granting premium.
# 🔗 Dependencies:
# pydantic, plantid.shared.utils.validators
# 🔄 Connected Modules / Calls From:
# ConfirmSubscriptionCommandHandler, presentation.api.v1.subscriptions

from pydantic import BaseModel, field_validator

from plantid.shared.utils.validators import validate_user_id


class ConfirmSubscriptionCommand(BaseModel):
    """Command for marking a user premium after a successful payment."""

    user_id: str

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)
