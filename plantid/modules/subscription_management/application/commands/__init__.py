# 📄 File: plantid/modules/subscription_management/application/commands/__init__.py
# 🧭 Purpose (Layman Explanation):
# The write requests the subscription feature accepts
# 🧪 Purpose (Technical Summary):
# Exports CQRS command definitions
# 🔗 Dependencies:
# pydantic, dataclasses
# 🔄 Connected Modules / Calls From:
# Command handlers, presentation routes

from .cancel_subscription import CancelSubscriptionCommand
from .confirm_subscription import ConfirmSubscriptionCommand
from .create_subscription import CreateSubscriptionCommand
from .process_stripe_webhook import ProcessStripeWebhookCommand

__all__ = [
    "CancelSubscriptionCommand",
    "ConfirmSubscriptionCommand",
    "CreateSubscriptionCommand",
    "ProcessStripeWebhookCommand",
]
