# 📄 File: plantid/modules/subscription_management/application/commands/process_stripe_webhook.py
# 🧭 Purpose (Layman Explanation):
# A message pushed to us by Stripe when something about a subscription changes (renewed, cancelled, paid).
# 🧪 Purpose (Technical Summary):
# CQRS command carrying the raw webhook body and its Stripe-Signature header for verification.
# 🔗 Dependencies:
# dataclasses
# 🔄 Connected Modules / Calls From:
# ProcessStripeWebhookCommandHandler, presentation.api.v1.subscriptions

from dataclasses import dataclass
from typing import Optional

# Events that change premium state; anything else is acknowledged and ignored
SUBSCRIPTION_UPDATED = "customer.subscription.updated"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"
INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"


@dataclass(frozen=True)
class ProcessStripeWebhookCommand:
    """Raw Stripe webhook delivery."""
    payload: bytes
    signature: Optional[str] = None
