"""
Shared test fixtures for the plant identification backend.

Provides: in-memory database, fake classifiers behind a real ClassifierRegistry,
a Stripe gateway double with real webhook verification, and an httpx client
Dependencies: pytest, pytest-asyncio, httpx, Pillow, stripe
"""

import base64
import hashlib
import hmac
import io
import json
import os
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

# Settings are read once and cached, so the environment must be in place before any plantid import
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
for _key in ("PLANT_ID_API_KEY", "OPENAI_API_KEY", "STRIPE_SECRET_KEY", "STRIPE_PRICE_ID", "STRIPE_WEBHOOK_SECRET"):
    os.environ.pop(_key, None)

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image

from plantid.modules.plant_identification.domain.models.plant_identification import PlantSuggestion
from plantid.modules.plant_identification.domain.services.plant_classifier import PlantClassifier
from plantid.modules.plant_identification.infrastructure.external.provider_registry import ClassifierRegistry
from plantid.modules.plant_identification.presentation.dependencies import get_classifier_registry
from plantid.modules.subscription_management.infrastructure.external.stripe_gateway import (
    StripeGateway,
    SubscriptionInfo,
)
from plantid.modules.subscription_management.presentation.dependencies import get_stripe_gateway
from plantid.shared.config.settings import get_settings
from plantid.shared.infrastructure.database.connection import close_database, db_manager, initialize_database
from plantid.shared.infrastructure.database.session import session_manager
from plantid.shared.infrastructure.external_apis.circuit_breaker import CircuitBreakerConfig

WEBHOOK_SECRET = "whsec_test_secret"


# =========================================================================
# IMAGES
# =========================================================================

def make_image_base64(image_format: str = "PNG", size=(32, 32)) -> str:
    """Base64 of a small solid-green image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, (34, 139, 34)).save(buffer, format=image_format)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


@pytest.fixture
def image_base64() -> str:
    return make_image_base64()


# =========================================================================
# CLASSIFIERS
# =========================================================================

class FakeClassifier(PlantClassifier):
    """Classifier returning canned results or raising a canned error."""

    def __init__(self, name: str, suggestion: Optional[PlantSuggestion] = None, error: Optional[Exception] = None):
        self.name = name
        self.suggestion = suggestion
        self.error = error
        self.calls = 0
        self.closed = False

    async def identify(self, image):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.suggestion

    async def close(self) -> None:
        self.closed = True


def monstera() -> PlantSuggestion:
    return PlantSuggestion(
        scientific_name="Monstera deliciosa",
        common_name="Swiss cheese plant",
        confidence=93,
        family="Araceae",
        description="A tropical climbing plant with split leaves.",
        origin="Central America",
        type="Vine",
    )


def make_registry(*classifiers: PlantClassifier) -> ClassifierRegistry:
    registry = ClassifierRegistry(CircuitBreakerConfig(failure_threshold=5, recovery_timeout=60.0))
    for priority, classifier in enumerate(classifiers, start=1):
        registry.register(classifier, priority=priority)
    return registry


@pytest.fixture
def plant_classifier() -> FakeClassifier:
    return FakeClassifier("plant_id", suggestion=monstera())


@pytest.fixture
def classifier_registry(plant_classifier) -> ClassifierRegistry:
    return make_registry(plant_classifier)


# =========================================================================
# STRIPE
# =========================================================================

class FakeStripeGateway(StripeGateway):
    """
    StripeGateway double keeping subscriptions in memory.

    Webhook verification is inherited unchanged, so events must be signed with WEBHOOK_SECRET.
    """

    def __init__(self):
        self.secret_key = "sk_test_fake"
        self.price_id = "price_test_premium"
        self.webhook_secret = WEBHOOK_SECRET
        self.customers: List[Dict[str, Any]] = []
        self.subscriptions: Dict[str, SubscriptionInfo] = {}
        self.next_status = "incomplete"
        self.subscription_error: Optional[Exception] = None
        self.period_end = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(days=30)

    async def create_customer(self, user_id: str, email: Optional[str] = None) -> str:
        customer_id = f"cus_{len(self.customers) + 1}"
        self.customers.append({"id": customer_id, "user_id": user_id, "email": email})
        return customer_id

    async def create_subscription(self, customer_id: str) -> SubscriptionInfo:
        if self.subscription_error is not None:
            raise self.subscription_error
        subscription_id = f"sub_{len(self.subscriptions) + 1}"
        info = SubscriptionInfo(
            id=subscription_id,
            status=self.next_status,
            customer_id=customer_id,
            client_secret=f"pi_{subscription_id}_secret",
            current_period_end=self.period_end,
        )
        self.subscriptions[subscription_id] = info
        return info

    async def retrieve_subscription(self, subscription_id: str) -> SubscriptionInfo:
        return self.subscriptions[subscription_id]

    async def cancel_at_period_end(self, subscription_id: str) -> SubscriptionInfo:
        info = self.subscriptions[subscription_id]
        info.cancel_at_period_end = True
        return info

    def set_status(self, subscription_id: str, status: str) -> None:
        self.subscriptions[subscription_id].status = status


@pytest.fixture
def stripe_gateway() -> FakeStripeGateway:
    return FakeStripeGateway()


def sign_webhook(payload: str, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """Build a Stripe-Signature header for a payload."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def stripe_event(event_type: str, data_object: Dict[str, Any]) -> str:
    return json.dumps({
        "id": "evt_test",
        "object": "event",
        "type": event_type,
        "data": {"object": data_object},
    })


# =========================================================================
# APPLICATION
# =========================================================================

@pytest.fixture
async def database():
    """Fresh in-memory database per test."""
    await initialize_database(get_settings().DATABASE_URL)
    await session_manager.initialize()
    yield db_manager
    session_manager.reset()
    await close_database()


@pytest.fixture
def app(classifier_registry, stripe_gateway):
    from plantid.main import create_application

    application = create_application()
    application.dependency_overrides[get_classifier_registry] = lambda: classifier_registry
    application.dependency_overrides[get_stripe_gateway] = lambda: stripe_gateway
    application.state.classifier_registry = classifier_registry
    return application


@pytest.fixture
async def client(app, database):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
