"""POST /api/identify-plant, GET /api/history/{userId} and GET /api/usage/{userId}."""

import base64

import pytest

from conftest import FakeClassifier, make_image_base64, make_registry, monstera
from plantid.modules.plant_identification.domain.models.plant_identification import PlantSuggestion
from plantid.modules.plant_identification.presentation.dependencies import get_classifier_registry
from plantid.shared.core.exceptions import ExternalAPIError


async def identify(client, image_base64, user_id="user-1", **extra):
    return await client.post("/api/identify-plant", json={"imageBase64": image_base64, "userId": user_id, **extra})


def use_registry(app, registry):
    app.dependency_overrides[get_classifier_registry] = lambda: registry


class TestIdentifyPlant:
    async def test_identifies_and_counts_usage(self, client, image_base64):
        response = await identify(client, image_base64)

        assert response.status_code == 200
        body = response.json()
        identification = body["identification"]
        assert identification["scientificName"] == "Monstera deliciosa"
        assert identification["commonName"] == "Swiss cheese plant"
        assert identification["confidence"] == 93
        assert identification["provider"] == "plant_id"
        assert identification["userId"] == "user-1"
        assert identification["imageUrl"].startswith("data:image/png;base64,")
        assert identification["id"] > 0
        assert body["usage"]["dailyCount"] == 1
        assert body["usage"]["totalCount"] == 1
        assert body["usage"]["remainingFree"] == 2
        assert body["usage"]["inTrial"] is True

    async def test_accepts_data_url_prefix(self, client):
        response = await identify(client, "data:image/jpeg;base64," + make_image_base64("JPEG"))

        assert response.status_code == 200
        assert response.json()["identification"]["imageUrl"].startswith("data:image/jpeg;base64,")

    async def test_fallback_fields(self, app, client, image_base64):
        use_registry(app, make_registry(FakeClassifier("plant_id", suggestion=PlantSuggestion(scientific_name="Ficus lyrata"))))

        identification = (await identify(client, image_base64)).json()["identification"]

        assert identification["commonName"] == "Ficus lyrata"
        assert identification["description"] == "No description available"
        assert identification["origin"] == "Unknown"
        assert identification["type"] == "Plant"

    async def test_daily_limit(self, client, image_base64, plant_classifier):
        for _ in range(3):
            assert (await identify(client, image_base64)).status_code == 200

        response = await identify(client, image_base64)

        assert response.status_code == 429
        error = response.json()["error"]
        assert error["code"] == "USAGE_LIMIT_EXCEEDED"
        assert error["details"]["reason"] == "daily_limit"
        assert error["details"]["usage"]["remainingFree"] == 0
        # Refused before any provider call
        assert plant_classifier.calls == 3

    async def test_limits_are_per_user(self, client, image_base64):
        for _ in range(3):
            await identify(client, image_base64, user_id="heavy-user")

        assert (await identify(client, image_base64, user_id="other-user")).status_code == 200

    async def test_no_plant_found_is_not_counted(self, app, client, image_base64):
        use_registry(app, make_registry(FakeClassifier("plant_id", suggestion=None)))

        response = await identify(client, image_base64)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NO_PLANT_IDENTIFIED"
        usage = (await client.get("/api/usage/user-1")).json()
        assert usage["dailyCount"] == 0
        assert (await client.get("/api/history/user-1")).json() == []

    async def test_failover_records_answering_provider(self, app, client, image_base64):
        broken = FakeClassifier("plant_id", error=ExternalAPIError("Plant.id returned 500", api_name="plant_id"))
        use_registry(app, make_registry(broken, FakeClassifier("openai", suggestion=monstera())))

        response = await identify(client, image_base64)

        assert response.status_code == 200
        assert response.json()["identification"]["provider"] == "openai"

    async def test_all_providers_failed(self, app, client, image_base64):
        use_registry(app, make_registry(FakeClassifier("plant_id", error=ExternalAPIError("down"))))

        response = await identify(client, image_base64)

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "API_ROTATION_FAILED"
        assert (await client.get("/api/usage/user-1")).json()["dailyCount"] == 0

    async def test_no_provider_configured(self, app, client, image_base64):
        use_registry(app, make_registry())

        response = await identify(client, image_base64)

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "EXTERNAL_SERVICE_UNAVAILABLE"

    async def test_pinned_provider(self, app, client, image_base64):
        use_registry(app, make_registry(
            FakeClassifier("plant_id", suggestion=monstera()),
            FakeClassifier("openai", suggestion=PlantSuggestion(scientific_name="Aloe vera", confidence=80)),
        ))

        response = await identify(client, image_base64, provider="openai")

        assert response.json()["identification"]["scientificName"] == "Aloe vera"

    async def test_unknown_provider(self, client, image_base64):
        response = await identify(client, image_base64, provider="nope")

        assert response.status_code == 400
        assert response.json()["error"]["details"]["field"] == "provider"

    @pytest.mark.parametrize(
        "image, code",
        [
            ("!!!not-base64!!!", "VALIDATION_ERROR"),
            (base64.b64encode(b"plain text").decode(), "INVALID_FILE_TYPE"),
        ],
    )
    async def test_bad_image(self, client, image, code):
        response = await identify(client, image)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == code

    @pytest.mark.parametrize(
        "body",
        [
            {"userId": "user-1"},
            {"imageBase64": "", "userId": "user-1"},
            {"imageBase64": "AAAA"},
            {"imageBase64": "AAAA", "userId": "bad user id"},
        ],
    )
    async def test_request_validation(self, client, body):
        response = await client.post("/api/identify-plant", json=body)

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["validation_errors"]


class TestHistory:
    async def test_newest_first(self, app, client, image_base64):
        await identify(client, image_base64)
        use_registry(app, make_registry(FakeClassifier("plant_id", suggestion=PlantSuggestion(scientific_name="Aloe vera"))))
        await identify(client, image_base64)

        history = (await client.get("/api/history/user-1")).json()

        assert [item["scientificName"] for item in history] == ["Aloe vera", "Monstera deliciosa"]

    async def test_limit(self, client, image_base64):
        for _ in range(3):
            await identify(client, image_base64)

        response = await client.get("/api/history/user-1", params={"limit": 2})

        assert response.status_code == 200
        assert len(response.json()) == 2

    async def test_oversized_limit_is_capped(self, client, image_base64):
        await identify(client, image_base64)

        response = await client.get("/api/history/user-1", params={"limit": 10_000})

        assert response.status_code == 200
        assert len(response.json()) == 1

    async def test_only_own_history(self, client, image_base64):
        await identify(client, image_base64, user_id="user-1")

        assert (await client.get("/api/history/user-2")).json() == []

    async def test_invalid_limit(self, client):
        response = await client.get("/api/history/user-1", params={"limit": 0})

        assert response.status_code == 422


class TestUsage:
    async def test_unknown_user_gets_defaults(self, client):
        response = await client.get("/api/usage/new-user")

        assert response.status_code == 200
        assert response.json() == {
            "dailyCount": 0,
            "totalCount": 0,
            "isPremium": False,
            "remainingFree": 3,
            "dailyLimit": 3,
            "inTrial": True,
            "trialDaysRemaining": 5,
            "premiumMonthlyCount": 0,
            "premiumMonthlyLimit": 100,
            "subscriptionStatus": None,
        }

    async def test_reflects_identifications(self, client, image_base64):
        await identify(client, image_base64)
        await identify(client, image_base64)

        usage = (await client.get("/api/usage/user-1")).json()

        assert usage["dailyCount"] == 2
        assert usage["remainingFree"] == 1
        assert usage["trialDaysRemaining"] == 5
