# 📄 File: plantid/modules/subscription_management/presentation/api/v1/subscriptions.py
# 🧭 Purpose (Layman Explanation):
# The endpoints for premium: start a subscription, confirm it after payment, cancel it,
# and the address Stripe calls to tell us when something changed.
#
# 🧪 Purpose (Technical Summary):
# FastAPI endpoints for the Stripe subscription lifecycle. Each route builds a CQRS command and
# delegates to its handler; domain exceptions are rendered by the global exception handlers.
#
# 🔗 Dependencies:
# - FastAPI router, Request, Header
# - subscription_management.application (commands, handlers)
# - subscription_management.presentation (schemas, dependencies)
#
# 🔄 Connected Modules / Calls From:
# - plantid.api.v1.router (mounted under /api)
# - Mobile/web client premium screens, Stripe webhook deliveries

"""
Subscription API Endpoints

Endpoints:
- POST /create-subscription: create or resume the user's subscription
- POST /subscription-success: grant premium once Stripe reports the subscription paid
- POST /cancel-subscription: cancel at period end, keep premium until then
- POST /stripe/webhook: Stripe lifecycle events (signature verified)

Stripe not configured => 503 on every endpoint.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from plantid.modules.subscription_management.application.commands.cancel_subscription import CancelSubscriptionCommand
from plantid.modules.subscription_management.application.commands.confirm_subscription import ConfirmSubscriptionCommand
from plantid.modules.subscription_management.application.commands.create_subscription import CreateSubscriptionCommand
from plantid.modules.subscription_management.application.commands.process_stripe_webhook import (
    ProcessStripeWebhookCommand,
)
from plantid.modules.subscription_management.application.handlers.command_handlers import (
    CancelSubscriptionCommandHandler,
    ConfirmSubscriptionCommandHandler,
    CreateSubscriptionCommandHandler,
    ProcessStripeWebhookCommandHandler,
)
from plantid.modules.subscription_management.presentation.api.schemas.subscription_schemas import (
    CancelSubscriptionResponse,
    CreateSubscriptionRequest,
    SubscriptionResponse,
    UsageResponse,
    UserIdRequest,
    WebhookAckResponse,
)
from plantid.modules.subscription_management.presentation.dependencies import (
    get_cancel_subscription_handler,
    get_confirm_subscription_handler,
    get_create_subscription_handler,
    get_stripe_webhook_handler,
)
from plantid.shared.core.dependencies import bind_user_context
from plantid.shared.utils.logging import get_logger

logger = get_logger(__name__)

subscriptions_router = APIRouter(tags=["Subscriptions"])


@subscriptions_router.post(
    "/create-subscription",
    response_model=SubscriptionResponse,
    summary="Create subscription",
    description="Create (or resume) the premium subscription and return the payment client secret",
    responses={
        200: {"description": "Subscription awaiting or holding payment"},
        502: {"description": "Stripe request failed"},
        503: {"description": "Payments not configured"},
    }
)
async def create_subscription(
    body: CreateSubscriptionRequest,
    handler: CreateSubscriptionCommandHandler = Depends(get_create_subscription_handler),
) -> SubscriptionResponse:
    bind_user_context(body.user_id)
    info = await handler.handle(CreateSubscriptionCommand(user_id=body.user_id, email=body.email))
    return SubscriptionResponse(
        subscription_id=info.id,
        client_secret=info.client_secret,
        status=info.status,
    )


@subscriptions_router.post(
    "/subscription-success",
    response_model=UsageResponse,
    summary="Confirm subscription",
    description="Verify the subscription with Stripe and unlock premium",
    responses={
        200: {"description": "Premium granted; updated usage snapshot"},
        402: {"description": "Subscription not active"},
        404: {"description": "No subscription for this user"},
        503: {"description": "Payments not configured"},
    }
)
async def subscription_success(
    body: UserIdRequest,
    handler: ConfirmSubscriptionCommandHandler = Depends(get_confirm_subscription_handler),
) -> UsageResponse:
    bind_user_context(body.user_id)
    return await handler.handle(ConfirmSubscriptionCommand(user_id=body.user_id))


@subscriptions_router.post(
    "/cancel-subscription",
    response_model=CancelSubscriptionResponse,
    summary="Cancel subscription",
    description="Stop renewal at the end of the current period",
    responses={
        200: {"description": "Cancellation scheduled"},
        404: {"description": "No subscription for this user"},
        503: {"description": "Payments not configured"},
    }
)
async def cancel_subscription(
    body: UserIdRequest,
    handler: CancelSubscriptionCommandHandler = Depends(get_cancel_subscription_handler),
) -> CancelSubscriptionResponse:
    bind_user_context(body.user_id)
    result = await handler.handle(CancelSubscriptionCommand(user_id=body.user_id))
    return CancelSubscriptionResponse(
        canceled=True,
        access_until=result.access_until,
        usage=result.usage,
    )


@subscriptions_router.post(
    "/stripe/webhook",
    response_model=WebhookAckResponse,
    summary="Stripe webhook",
    description="Receives Stripe subscription lifecycle events",
    responses={
        200: {"description": "Event acknowledged"},
        400: {"description": "Invalid signature"},
    }
)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    handler: ProcessStripeWebhookCommandHandler = Depends(get_stripe_webhook_handler),
) -> WebhookAckResponse:
    # Signature verification needs the exact raw body
    payload = await request.body()
    event_type = await handler.handle(ProcessStripeWebhookCommand(payload=payload, signature=stripe_signature))
    logger.info(f"Stripe webhook processed: {event_type}")
    return WebhookAckResponse(received=True)
