# 📄 File: plantid/modules/subscription_management/infrastructure/external/stripe_gateway.py
# 🧭 Purpose (Layman Explanation):
# Talks to Stripe, our payment company: creates customers and monthly subscriptions,
# checks whether a subscription is paid up, cancels it, and verifies Stripe's webhook messages.
#
# 🧪 Purpose (Technical Summary):
# Thin async adapter over the synchronous Stripe SDK. Each call runs in a worker thread
# (asyncio.to_thread) with a per-call api_key, and Stripe failures are mapped onto
# PaymentProviderError. Subscription objects are normalized into SubscriptionInfo.
#
# 🔗 Dependencies:
# - stripe SDK
# - plantid.shared.config.settings (keys, price, webhook secret)
# - plantid.shared.core.exceptions (ExternalServiceError, PaymentProviderError, ValidationError)
#
# 🔄 Connected Modules / Calls From:
# - subscription command handlers (create / confirm / cancel / webhook)
# - subscription_management.presentation.dependencies (gateway provider)

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import stripe

from plantid.shared.config.settings import Settings
from plantid.shared.core.exceptions import ExternalServiceError, PaymentProviderError, ValidationError

logger = logging.getLogger(__name__)


def _field(obj: Any, key: str) -> Any:
    """Read a key from a Stripe object or plain dict, tolerating None and missing keys."""
    if obj is None:
        return None
    # StripeObject is a dict subclass; attribute lookup would hit dict methods such as items()
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


@dataclass
class SubscriptionInfo:
    """Subscription fields the backend acts on."""
    id: str
    status: str
    customer_id: Optional[str] = None
    client_secret: Optional[str] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False

    @classmethod
    def from_stripe(cls, subscription: Any) -> "SubscriptionInfo":
        """
        Normalize a Stripe subscription (SDK object or webhook payload dict).

        The client secret comes from the expanded latest invoice's payment intent,
        or from its confirmation secret on newer API versions.
        """
        customer = _field(subscription, "customer")
        if not isinstance(customer, str):
            customer = _field(customer, "id")

        invoice = _field(subscription, "latest_invoice")
        client_secret = _field(_field(invoice, "payment_intent"), "client_secret")
        if client_secret is None:
            client_secret = _field(_field(invoice, "confirmation_secret"), "client_secret")

        period_end = _field(subscription, "current_period_end")
        if period_end is None:
            # Newer API versions report the period on subscription items
            items = _field(_field(subscription, "items"), "data") or []
            if items:
                period_end = _field(items[0], "current_period_end")

        return cls(
            id=_field(subscription, "id"),
            status=_field(subscription, "status"),
            customer_id=customer,
            client_secret=client_secret,
            current_period_end=_timestamp(period_end),
            cancel_at_period_end=bool(_field(subscription, "cancel_at_period_end")),
        )


class StripeGateway:
    """
    Async facade over the Stripe SDK for the premium monthly plan.
    """

    def __init__(self, settings: Settings):
        self.secret_key = settings.STRIPE_SECRET_KEY
        self.price_id = settings.STRIPE_PRICE_ID
        self.webhook_secret = settings.STRIPE_WEBHOOK_SECRET

    @property
    def configured(self) -> bool:
        return bool(self.secret_key and self.price_id)

    def ensure_configured(self) -> None:
        """
        Raises:
            ExternalServiceError: If Stripe keys are missing (503)
        """
        if not self.configured:
            raise ExternalServiceError(
                "Payment provider is not configured",
                service="stripe",
            )

    async def _call(self, operation: str, func, *args, **kwargs):
        self.ensure_configured()
        try:
            return await asyncio.to_thread(func, *args, api_key=self.secret_key, **kwargs)
        except stripe.error.StripeError as e:
            logger.error(f"❌ Stripe {operation} failed: {e}")
            raise PaymentProviderError(
                getattr(e, "user_message", None) or f"Stripe {operation} failed",
                operation=operation,
            )

    # ===== CUSTOMERS =====

    async def create_customer(self, user_id: str, email: Optional[str] = None) -> str:
        """
        Create a Stripe customer tagged with the app's user id.

        Returns:
            str: Stripe customer id
        """
        params: Dict[str, Any] = {"metadata": {"user_id": user_id}}
        if email:
            params["email"] = email
        customer = await self._call("create_customer", stripe.Customer.create, **params)
        logger.info(f"✅ Created Stripe customer {customer['id']} for user {user_id}")
        return customer["id"]

    # ===== SUBSCRIPTIONS =====

    async def create_subscription(self, customer_id: str) -> SubscriptionInfo:
        """Create an incomplete subscription awaiting the first payment."""
        subscription = await self._call(
            "create_subscription",
            stripe.Subscription.create,
            customer=customer_id,
            items=[{"price": self.price_id}],
            payment_behavior="default_incomplete",
            payment_settings={"save_default_payment_method": "on_subscription"},
            expand=["latest_invoice.payment_intent"],
        )
        info = SubscriptionInfo.from_stripe(subscription)
        logger.info(f"✅ Created Stripe subscription {info.id} ({info.status}) for customer {customer_id}")
        return info

    async def retrieve_subscription(self, subscription_id: str) -> SubscriptionInfo:
        subscription = await self._call(
            "retrieve_subscription",
            stripe.Subscription.retrieve,
            subscription_id,
            expand=["latest_invoice.payment_intent"],
        )
        return SubscriptionInfo.from_stripe(subscription)

    async def cancel_at_period_end(self, subscription_id: str) -> SubscriptionInfo:
        """Stop renewal; the subscription stays active until its period ends."""
        subscription = await self._call(
            "cancel_subscription",
            stripe.Subscription.modify,
            subscription_id,
            cancel_at_period_end=True,
        )
        info = SubscriptionInfo.from_stripe(subscription)
        logger.info(f"✅ Stripe subscription {subscription_id} set to cancel at {info.current_period_end}")
        return info

    # ===== WEBHOOKS =====

    def construct_event(self, payload: bytes, signature: Optional[str]) -> Any:
        """
        Verify a webhook payload against its Stripe-Signature header.

        Raises:
            ExternalServiceError: If no webhook secret is configured (503)
            ValidationError: If the signature or payload is invalid (400)
        """
        if not self.webhook_secret:
            raise ExternalServiceError("Stripe webhook secret is not configured", service="stripe")
        if not signature:
            raise ValidationError(
                "Missing Stripe-Signature header",
                field="Stripe-Signature",
                status_code=400
            )
        try:
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.error.SignatureVerificationError) as e:
            logger.warning(f"Rejected Stripe webhook: {e}")
            raise ValidationError(
                "Invalid Stripe webhook signature",
                field="Stripe-Signature",
                status_code=400
            )
