# 📄 File: plantid/modules/subscription_management/infrastructure/external/__init__.py
# 🧭 Purpose (Layman Explanation):
# Connection to the payment provider
# 🧪 Purpose (Technical Summary):
# Exports the Stripe gateway and its normalized subscription view
# 🔗 Dependencies:
# stripe_gateway
# 🔄 Connected Modules / Calls From:
# Subscription command handlers, presentation dependencies

from .stripe_gateway import StripeGateway, SubscriptionInfo

__all__ = ["StripeGateway", "SubscriptionInfo"]
