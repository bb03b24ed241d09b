# 📄 File: plantid/modules/subscription_management/application/handlers/command_handlers.py
# 🧭 Purpose (Layman Explanation):
# The "action processors" for subscriptions: start one with Stripe, switch the user to premium once paid,
# cancel at the end of the month, and react to Stripe's webhook notifications.
#
# 🧪 Purpose (Technical Summary):
# CQRS command handlers orchestrating the UsageService (persistence + quota policy) and the
# StripeGateway for subscription write operations. Stripe remains the source of truth for status.
#
# 🔗 Dependencies:
# - plantid.modules.subscription_management.application.commands
# - plantid.modules.subscription_management.domain (UsageService, SubscriptionStatus)
# - plantid.modules.subscription_management.infrastructure.external (StripeGateway, SubscriptionInfo)
# - plantid.shared.core.exceptions
#
# 🔄 Connected Modules / Calls From:
# - plantid.modules.subscription_management.presentation.api.v1.subscriptions

__all__ = [
    "CreateSubscriptionCommandHandler",
    "ConfirmSubscriptionCommandHandler",
    "CancelSubscriptionCommandHandler",
    "ProcessStripeWebhookCommandHandler",
    "CancellationResult",
]

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

# --- Application commands ---
from plantid.modules.subscription_management.application.commands.cancel_subscription import CancelSubscriptionCommand
from plantid.modules.subscription_management.application.commands.confirm_subscription import ConfirmSubscriptionCommand
from plantid.modules.subscription_management.application.commands.create_subscription import CreateSubscriptionCommand
from plantid.modules.subscription_management.application.commands.process_stripe_webhook import (
    INVOICE_PAYMENT_SUCCEEDED,
    SUBSCRIPTION_DELETED,
    SUBSCRIPTION_UPDATED,
    ProcessStripeWebhookCommand,
)

# --- Domain ---
from plantid.modules.subscription_management.domain.models.user_usage import (
    SubscriptionStatus,
    UsageSnapshot,
    UserUsage,
)
from plantid.modules.subscription_management.domain.services.usage_service import UsageService

# --- Infrastructure / External services ---
from plantid.modules.subscription_management.infrastructure.external.stripe_gateway import (
    StripeGateway,
    SubscriptionInfo,
)
from plantid.shared.core.exceptions import NotFoundError, SubscriptionError
from plantid.shared.utils.logging import get_logger

logger = get_logger(__name__)

# Stripe statuses after which a subscription can no longer be paid
_DEAD_STATUSES = (
    SubscriptionStatus.CANCELED.value,
    SubscriptionStatus.INCOMPLETE_EXPIRED.value,
)


def _require_subscription(usage: Optional[UserUsage], user_id: str) -> UserUsage:
    if usage is None or not usage.stripe_subscription_id:
        raise NotFoundError(
            "No subscription found for this user",
            resource_type="subscription",
            resource_id=user_id,
        )
    return usage


@dataclass
class CancellationResult:
    """Outcome of a cancel-at-period-end request."""
    access_until: Optional[datetime]
    usage: UsageSnapshot


class CreateSubscriptionCommandHandler:
    """
    Creates (or resumes) the user's Stripe subscription.
    """

    def __init__(self, usage_service: UsageService, gateway: StripeGateway):
        self._usage_service = usage_service
        self._gateway = gateway

    async def handle(self, command: CreateSubscriptionCommand) -> SubscriptionInfo:
        """
        Ensure a Stripe customer and subscription exist for the user.

        An existing, still payable subscription is returned instead of creating
        a second one, so retries from the client are idempotent.

        Returns:
            SubscriptionInfo: Subscription id, status and payment client secret
        """
        self._gateway.ensure_configured()

        usage = await self._usage_service.get_or_create(command.user_id)

        customer_id = usage.stripe_customer_id
        if not customer_id:
            customer_id = await self._gateway.create_customer(command.user_id, command.email)
            # Kept even if creating the subscription fails, so a retry reuses this customer
            usage.attach_stripe(customer_id=customer_id)
            usage = await self._usage_service.save(usage, commit=True)

        info = None
        if usage.stripe_subscription_id:
            info = await self._gateway.retrieve_subscription(usage.stripe_subscription_id)
            if info.status in _DEAD_STATUSES:
                logger.info(f"Subscription {info.id} for user {command.user_id} is {info.status}, creating a new one")
                info = None

        if info is None:
            info = await self._gateway.create_subscription(customer_id)

        usage.attach_stripe(customer_id=customer_id, subscription_id=info.id, status=info.status)
        await self._usage_service.save(usage)

        logger.log_business_event(
            "subscription_created",
            f"Subscription {info.id} ready for payment ({info.status})",
            user_id=command.user_id,
            extra={"subscription_id": info.id, "status": info.status},
        )
        return info


class ConfirmSubscriptionCommandHandler:
    """
    Grants premium once Stripe reports the subscription as paid.
    """

    def __init__(self, usage_service: UsageService, gateway: StripeGateway):
        self._usage_service = usage_service
        self._gateway = gateway

    async def handle(self, command: ConfirmSubscriptionCommand) -> UsageSnapshot:
        """
        Raises:
            NotFoundError: The user has no stored subscription (404)
            SubscriptionError: Stripe does not report it active or trialing (402)
        """
        self._gateway.ensure_configured()

        usage = _require_subscription(await self._usage_service.get(command.user_id), command.user_id)
        info = await self._gateway.retrieve_subscription(usage.stripe_subscription_id)

        if not SubscriptionStatus.grants_premium(info.status):
            logger.warning(f"Subscription {info.id} for user {command.user_id} is not paid yet ({info.status})")
            raise SubscriptionError(
                f"Subscription is not active (status: {info.status})",
                user_id=command.user_id,
                subscription_status=info.status,
                reason="payment_incomplete",
            )

        usage.grant_premium(self._usage_service.current_month(), status=info.status)
        usage = await self._usage_service.save(usage)

        logger.log_business_event(
            "premium_granted",
            f"✅ Premium activated for user {command.user_id}",
            user_id=command.user_id,
            extra={"subscription_id": info.id},
        )
        return self._usage_service.snapshot_of(usage)


class CancelSubscriptionCommandHandler:
    """
    Cancels at period end; premium is kept until the paid period runs out.
    """

    def __init__(self, usage_service: UsageService, gateway: StripeGateway):
        self._usage_service = usage_service
        self._gateway = gateway

    async def handle(self, command: CancelSubscriptionCommand) -> CancellationResult:
        self._gateway.ensure_configured()

        usage = _require_subscription(await self._usage_service.get(command.user_id), command.user_id)
        info = await self._gateway.cancel_at_period_end(usage.stripe_subscription_id)

        usage.schedule_premium_end(info.current_period_end, status=info.status)
        usage = await self._usage_service.save(usage)

        logger.log_business_event(
            "subscription_cancelled",
            f"Subscription {info.id} cancelled at period end",
            user_id=command.user_id,
            extra={"access_until": info.current_period_end.isoformat() if info.current_period_end else None},
        )
        return CancellationResult(
            access_until=info.current_period_end,
            usage=self._usage_service.snapshot_of(usage),
        )


class ProcessStripeWebhookCommandHandler:
    """
    Applies Stripe subscription lifecycle events to usage records.
    """

    def __init__(self, usage_service: UsageService, gateway: StripeGateway):
        self._usage_service = usage_service
        self._gateway = gateway

    async def handle(self, command: ProcessStripeWebhookCommand) -> str:
        """
        Verify and apply one webhook event.

        Returns:
            str: The event type

        Raises:
            ValidationError: Invalid signature or payload (400)
        """
        event = self._gateway.construct_event(command.payload, command.signature)
        event_type = event["type"]
        data_object = event["data"]["object"]

        if event_type == SUBSCRIPTION_UPDATED:
            await self._subscription_updated(SubscriptionInfo.from_stripe(data_object))
        elif event_type == SUBSCRIPTION_DELETED:
            await self._subscription_deleted(SubscriptionInfo.from_stripe(data_object))
        elif event_type == INVOICE_PAYMENT_SUCCEEDED:
            await self._payment_succeeded(data_object)
        else:
            logger.debug(f"Ignoring Stripe event {event_type}")

        return event_type

    async def _find(self, subscription_id: Optional[str], customer_id: Optional[str]) -> Optional[UserUsage]:
        usage = await self._usage_service.find_by_stripe_ids(subscription_id, customer_id)
        if usage is None:
            logger.warning(
                f"No usage record for Stripe subscription {subscription_id} / customer {customer_id}"
            )
        return usage

    async def _subscription_updated(self, info: SubscriptionInfo) -> None:
        usage = await self._find(info.id, info.customer_id)
        if usage is None:
            return

        usage.attach_stripe(customer_id=info.customer_id, subscription_id=info.id, status=info.status)
        if SubscriptionStatus.grants_premium(info.status):
            usage.grant_premium(self._usage_service.current_month(), status=info.status)
            if info.cancel_at_period_end:
                usage.schedule_premium_end(info.current_period_end, status=info.status)
        else:
            usage.revoke_premium(status=info.status)

        await self._usage_service.save(usage)
        logger.info(f"Synced subscription {info.id} for user {usage.user_id}: {info.status}")

    async def _subscription_deleted(self, info: SubscriptionInfo) -> None:
        usage = await self._find(info.id, info.customer_id)
        if usage is None:
            return

        usage.revoke_premium(status=info.status or SubscriptionStatus.CANCELED.value)
        await self._usage_service.save(usage)
        logger.log_business_event(
            "premium_revoked",
            f"Premium revoked after subscription {info.id} ended",
            user_id=usage.user_id,
        )

    async def _payment_succeeded(self, invoice: Any) -> None:
        subscription_id = _invoice_subscription_id(invoice)
        customer_id = invoice.get("customer")
        if not isinstance(customer_id, str) and customer_id is not None:
            customer_id = customer_id.get("id")

        usage = await self._find(subscription_id, customer_id)
        if usage is None:
            return

        usage.attach_stripe(subscription_id=subscription_id)
        usage.grant_premium(self._usage_service.current_month(), status=SubscriptionStatus.ACTIVE.value)
        await self._usage_service.save(usage)
        logger.log_business_event(
            "premium_renewed",
            "✅ Premium renewed after invoice payment",
            user_id=usage.user_id,
            extra={"subscription_id": subscription_id},
        )


def _invoice_subscription_id(invoice: Any) -> Optional[str]:
    """Subscription id of an invoice, on both old and new Stripe API versions."""
    subscription = invoice.get("subscription")
    if subscription is None:
        details = (invoice.get("parent") or {}).get("subscription_details") or {}
        subscription = details.get("subscription")
    if subscription is not None and not isinstance(subscription, str):
        subscription = subscription.get("id")
    return subscription
