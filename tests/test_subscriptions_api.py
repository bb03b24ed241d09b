"""Subscription lifecycle endpoints and Stripe webhooks."""

from datetime import datetime

import pytest

from conftest import sign_webhook, stripe_event
from plantid.modules.subscription_management.infrastructure.external.stripe_gateway import StripeGateway
from plantid.modules.subscription_management.presentation.dependencies import get_stripe_gateway
from plantid.shared.config.settings import get_settings
from plantid.shared.core.exceptions import PaymentProviderError


def parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def create_subscription(client, user_id="user-1", email=None):
    body = {"userId": user_id}
    if email:
        body["email"] = email
    return await client.post("/api/create-subscription", json=body)


async def subscribe(client, stripe_gateway, user_id="user-1"):
    """Create a subscription, mark it paid and confirm it."""
    subscription_id = (await create_subscription(client, user_id)).json()["subscriptionId"]
    stripe_gateway.set_status(subscription_id, "active")
    response = await client.post("/api/subscription-success", json={"userId": user_id})
    assert response.status_code == 200
    return subscription_id


async def usage(client, user_id="user-1"):
    return (await client.get(f"/api/usage/{user_id}")).json()


class TestCreateSubscription:
    async def test_creates_customer_and_subscription(self, client, stripe_gateway):
        response = await create_subscription(client, email="grower@example.com")

        assert response.status_code == 200
        assert response.json() == {
            "subscriptionId": "sub_1",
            "clientSecret": "pi_sub_1_secret",
            "status": "incomplete",
        }
        assert stripe_gateway.customers == [{"id": "cus_1", "user_id": "user-1", "email": "grower@example.com"}]
        snapshot = await usage(client)
        assert snapshot["subscriptionStatus"] == "incomplete"
        assert snapshot["isPremium"] is False

    async def test_retry_reuses_pending_subscription(self, client, stripe_gateway):
        await create_subscription(client)

        response = await create_subscription(client)

        assert response.json()["subscriptionId"] == "sub_1"
        assert len(stripe_gateway.customers) == 1
        assert len(stripe_gateway.subscriptions) == 1

    async def test_dead_subscription_is_replaced(self, client, stripe_gateway):
        await create_subscription(client)
        stripe_gateway.set_status("sub_1", "incomplete_expired")

        response = await create_subscription(client)

        assert response.json()["subscriptionId"] == "sub_2"
        assert len(stripe_gateway.customers) == 1

    async def test_failed_subscription_keeps_customer(self, client, stripe_gateway):
        stripe_gateway.subscription_error = PaymentProviderError("Card declined", operation="create_subscription")

        for _ in range(2):
            response = await create_subscription(client)
            assert response.status_code == 502
            assert response.json()["error"]["code"] == "PAYMENT_PROVIDER_ERROR"

        stripe_gateway.subscription_error = None
        response = await create_subscription(client)

        assert response.status_code == 200
        assert [customer["id"] for customer in stripe_gateway.customers] == ["cus_1"]

    async def test_invalid_user_id(self, client):
        response = await client.post("/api/create-subscription", json={"userId": "no spaces allowed"})

        assert response.status_code == 422

    async def test_payments_not_configured(self, app, client):
        app.dependency_overrides[get_stripe_gateway] = lambda: StripeGateway(get_settings())

        response = await create_subscription(client)

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "EXTERNAL_SERVICE_UNAVAILABLE"


class TestConfirmSubscription:
    async def test_grants_premium_when_active(self, client, stripe_gateway):
        await create_subscription(client)
        stripe_gateway.set_status("sub_1", "active")

        response = await client.post("/api/subscription-success", json={"userId": "user-1"})

        assert response.status_code == 200
        snapshot = response.json()
        assert snapshot["isPremium"] is True
        assert snapshot["remainingFree"] is None
        assert snapshot["subscriptionStatus"] == "active"

    async def test_unpaid_subscription(self, client):
        await create_subscription(client)

        response = await client.post("/api/subscription-success", json={"userId": "user-1"})

        assert response.status_code == 402
        error = response.json()["error"]
        assert error["code"] == "SUBSCRIPTION_REQUIRED"
        assert error["details"]["reason"] == "payment_incomplete"
        assert (await usage(client))["isPremium"] is False

    async def test_no_subscription(self, client):
        response = await client.post("/api/subscription-success", json={"userId": "stranger"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_premium_lifts_daily_limit(self, client, stripe_gateway, image_base64):
        await subscribe(client, stripe_gateway)

        for _ in range(5):
            response = await client.post(
                "/api/identify-plant",
                json={"imageBase64": image_base64, "userId": "user-1"},
            )
            assert response.status_code == 200

        snapshot = await usage(client)
        assert snapshot["premiumMonthlyCount"] == 5
        assert snapshot["dailyCount"] == 5


class TestCancelSubscription:
    async def test_keeps_premium_until_period_end(self, client, stripe_gateway):
        await subscribe(client, stripe_gateway)

        response = await client.post("/api/cancel-subscription", json={"userId": "user-1"})

        assert response.status_code == 200
        body = response.json()
        assert body["canceled"] is True
        assert parse_datetime(body["accessUntil"]) == stripe_gateway.period_end
        assert body["usage"]["isPremium"] is True
        assert stripe_gateway.subscriptions["sub_1"].cancel_at_period_end is True

    async def test_no_subscription(self, client):
        response = await client.post("/api/cancel-subscription", json={"userId": "user-1"})

        assert response.status_code == 404


class TestStripeWebhook:
    async def post_event(self, client, event_type, data_object, signature=None):
        payload = stripe_event(event_type, data_object)
        headers = {"Content-Type": "application/json"}
        headers["Stripe-Signature"] = signature or sign_webhook(payload)
        return await client.post("/api/stripe/webhook", content=payload, headers=headers)

    async def test_subscription_activated(self, client, stripe_gateway):
        await create_subscription(client)

        response = await self.post_event(client, "customer.subscription.updated", {
            "id": "sub_1",
            "object": "subscription",
            "customer": "cus_1",
            "status": "active",
            "cancel_at_period_end": False,
            "current_period_end": int(stripe_gateway.period_end.timestamp()),
        })

        assert response.status_code == 200
        assert response.json() == {"received": True}
        snapshot = await usage(client)
        assert snapshot["isPremium"] is True
        assert snapshot["subscriptionStatus"] == "active"

    async def test_subscription_past_due_revokes(self, client, stripe_gateway):
        await subscribe(client, stripe_gateway)

        await self.post_event(client, "customer.subscription.updated", {
            "id": "sub_1",
            "object": "subscription",
            "customer": "cus_1",
            "status": "past_due",
        })

        snapshot = await usage(client)
        assert snapshot["isPremium"] is False
        assert snapshot["subscriptionStatus"] == "past_due"

    async def test_cancel_at_period_end_keeps_premium(self, client, stripe_gateway):
        await subscribe(client, stripe_gateway)

        await self.post_event(client, "customer.subscription.updated", {
            "id": "sub_1",
            "object": "subscription",
            "customer": "cus_1",
            "status": "active",
            "cancel_at_period_end": True,
            "current_period_end": int(stripe_gateway.period_end.timestamp()),
        })

        assert (await usage(client))["isPremium"] is True

    async def test_subscription_deleted(self, client, stripe_gateway):
        await subscribe(client, stripe_gateway)

        await self.post_event(client, "customer.subscription.deleted", {
            "id": "sub_1",
            "object": "subscription",
            "customer": "cus_1",
            "status": "canceled",
        })

        snapshot = await usage(client)
        assert snapshot["isPremium"] is False
        assert snapshot["subscriptionStatus"] == "canceled"

    async def test_invoice_paid_renews_premium(self, client):
        await create_subscription(client)

        await self.post_event(client, "invoice.payment_succeeded", {
            "id": "in_1",
            "object": "invoice",
            "customer": "cus_1",
            "parent": {"subscription_details": {"subscription": "sub_1"}},
        })

        assert (await usage(client))["isPremium"] is True

    async def test_unknown_subscription_is_acknowledged(self, client):
        response = await self.post_event(client, "customer.subscription.deleted", {
            "id": "sub_unknown",
            "object": "subscription",
            "customer": "cus_unknown",
            "status": "canceled",
        })

        assert response.status_code == 200

    async def test_unhandled_event_type_is_acknowledged(self, client):
        response = await self.post_event(client, "charge.refunded", {"id": "ch_1", "object": "charge"})

        assert response.status_code == 200

    async def test_invalid_signature(self, client):
        response = await self.post_event(
            client,
            "customer.subscription.deleted",
            {"id": "sub_1", "object": "subscription", "status": "canceled"},
            signature=sign_webhook("{}", secret="whsec_wrong"),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_missing_signature(self, client):
        response = await client.post(
            "/api/stripe/webhook",
            content=stripe_event("charge.refunded", {"id": "ch_1"}),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400


@pytest.mark.parametrize(
    "subscription, expected_secret",
    [
        ({"latest_invoice": {"payment_intent": {"client_secret": "pi_secret"}}}, "pi_secret"),
        ({"latest_invoice": {"confirmation_secret": {"client_secret": "cs_secret"}}}, "cs_secret"),
        ({"latest_invoice": "in_123"}, None),
    ],
)
def test_subscription_info_client_secret(subscription, expected_secret):
    from plantid.modules.subscription_management.infrastructure.external.stripe_gateway import SubscriptionInfo

    info = SubscriptionInfo.from_stripe({"id": "sub_1", "status": "incomplete", "customer": "cus_1", **subscription})

    assert info.client_secret == expected_secret


def test_subscription_info_period_end_from_items():
    from plantid.modules.subscription_management.infrastructure.external.stripe_gateway import SubscriptionInfo

    info = SubscriptionInfo.from_stripe({
        "id": "sub_1",
        "status": "active",
        "customer": {"id": "cus_1"},
        "items": {"data": [{"current_period_end": 1767225600}]},
    })

    assert info.customer_id == "cus_1"
    assert info.current_period_end.isoformat() == "2026-01-01T00:00:00+00:00"
