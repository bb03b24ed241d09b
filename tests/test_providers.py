"""Classifier adapters: request payloads, response parsing and the registry."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from conftest import FakeClassifier, make_image_base64, make_registry, monstera
from plantid.modules.plant_identification.domain.models.plant_identification import (
    PlantIdentification,
    PlantSuggestion,
    confidence_from_probability,
)
from plantid.modules.plant_identification.infrastructure.external.openai_vision_client import (
    OpenAIVisionClient,
    build_openai_payload,
    parse_openai_response,
)
from plantid.modules.plant_identification.infrastructure.external.plant_id_client import (
    PlantIdClient,
    build_plant_id_payload,
    parse_plant_id_response,
)
from plantid.modules.plant_identification.infrastructure.external.provider_registry import (
    ClassifierRegistry,
    build_classifier_registry,
)
from plantid.shared.config.settings import Settings
from plantid.shared.core.exceptions import APIRotationError, ExternalAPIError, ExternalServiceError
from plantid.shared.infrastructure.external_apis.api_client import APIClient
from plantid.shared.utils.validators import decode_image_payload

PLANT_ID_RESPONSE = {
    "result": {
        "is_plant": {"binary": True, "probability": 0.99},
        "classification": {
            "suggestions": [
                {
                    "name": "Ficus lyrata",
                    "probability": 0.875,
                    "details": {
                        "common_names": ["fiddle-leaf fig", "banjo fig"],
                        "taxonomy": {"kingdom": "Plantae", "class": "Magnoliopsida", "family": "Moraceae"},
                        "description": {"value": "A species of flowering plant in the mulberry family."},
                    },
                },
                {"name": "Ficus elastica", "probability": 0.05},
            ]
        },
    }
}


def openai_reply(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def image():
    return decode_image_payload(make_image_base64(), 5 * 1024 * 1024)


@pytest.mark.parametrize(
    "probability, expected",
    [(0.875, 88), (0.004, 0), (0.125, 13), (0.5, 50), (1.0, 100), (1.7, 100), (-0.2, 0), (None, 0), ("x", 0)],
)
def test_confidence_from_probability(probability, expected):
    assert confidence_from_probability(probability) == expected


class TestPlantId:
    def test_payload(self):
        payload = build_plant_id_payload("AAAA")

        assert payload["images"] == ["AAAA"]
        assert "common_names" in payload["plant_details"]

    def test_parse_top_suggestion(self):
        suggestion = parse_plant_id_response(PLANT_ID_RESPONSE)

        assert suggestion.scientific_name == "Ficus lyrata"
        assert suggestion.common_name == "fiddle-leaf fig"
        assert suggestion.confidence == 88
        assert suggestion.family == "Moraceae"
        assert suggestion.description.startswith("A species")

    @pytest.mark.parametrize(
        "data",
        [{}, {"result": {}}, {"result": {"classification": {"suggestions": []}}}, {"result": {"classification": {"suggestions": [{"name": " "}]}}}],
    )
    def test_parse_no_suggestion(self, data):
        assert parse_plant_id_response(data) is None

    @pytest.mark.parametrize(
        "suggestion",
        [
            {"name": 123, "probability": 0.9},
            "Ficus lyrata",
            {"name": "Ficus lyrata", "details": {"common_names": [5]}},
            {"name": "Ficus lyrata", "details": {"taxonomy": ["Moraceae"]}},
        ],
    )
    def test_parse_malformed_suggestion(self, suggestion):
        data = {"result": {"classification": {"suggestions": [suggestion]}}}

        assert parse_plant_id_response(data) is None

    def test_recent_errors_reach_registry_status(self):
        client = PlantIdClient(api_key="key", api_url="https://plant.id/api")
        client.client._record_error(ExternalAPIError("Plant.id returned 500"), "POST", "https://plant.id/api")
        registry = make_registry(client)

        errors = registry.get_status()["recent_errors"]["plant_id"]

        assert errors[0]["error_type"] == "ExternalAPIError"
        assert errors[0]["api_name"] == "plant_id"

    async def test_identify_posts_image(self, image):
        client = PlantIdClient(api_key="key", api_url="https://plant.id/api")

        with patch.object(APIClient, "post", new=AsyncMock(return_value=PLANT_ID_RESPONSE)) as post:
            suggestion = await client.identify(image)

        assert suggestion.scientific_name == "Ficus lyrata"
        sent = post.call_args.kwargs["data"]
        assert sent["images"] == [image.base64_data]


class TestOpenAI:
    def test_payload_attaches_image(self):
        payload = build_openai_payload("data:image/png;base64,AAAA", model="gpt-4o", max_tokens=300)

        assert payload["response_format"] == {"type": "json_object"}
        image_part = payload["messages"][1]["content"][1]
        assert image_part["image_url"]["url"] == "data:image/png;base64,AAAA"

    def test_parse_json_reply(self):
        reply = openai_reply(json.dumps({
            "scientificName": "Aloe vera",
            "commonName": "Aloe",
            "confidence": 91,
            "family": "Asphodelaceae",
            "description": "A succulent.",
            "origin": "Arabian Peninsula",
            "type": "Succulent",
        }))

        suggestion = parse_openai_response(reply)

        assert suggestion == PlantSuggestion(
            scientific_name="Aloe vera",
            common_name="Aloe",
            confidence=91,
            family="Asphodelaceae",
            description="A succulent.",
            origin="Arabian Peninsula",
            type="Succulent",
        )

    @pytest.mark.parametrize("confidence, expected", [(0.42, 42), (1, 100), (1.0, 100), (0, 0), (2, 2)])
    def test_probability_style_confidence(self, confidence, expected):
        reply = openai_reply(json.dumps({"scientificName": "Aloe vera", "confidence": confidence}))

        assert parse_openai_response(reply).confidence == expected

    @pytest.mark.parametrize(
        "reply",
        [
            {},
            {"choices": []},
            openai_reply(None),
            openai_reply("I think it is a fern"),
            openai_reply(json.dumps({"identified": False})),
            openai_reply(json.dumps({"commonName": "Mystery"})),
            openai_reply(json.dumps(["Aloe vera"])),
        ],
    )
    def test_parse_unusable_reply(self, reply):
        assert parse_openai_response(reply) is None

    async def test_identify_sends_data_url(self, image):
        client = OpenAIVisionClient(api_key="key", api_url="https://openai/api", model="gpt-4o")
        reply = openai_reply(json.dumps({"scientificName": "Aloe vera", "confidence": 80}))

        with patch.object(APIClient, "post", new=AsyncMock(return_value=reply)) as post:
            suggestion = await client.identify(image)

        assert suggestion.scientific_name == "Aloe vera"
        sent = post.call_args.kwargs["data"]
        assert sent["model"] == "gpt-4o"
        assert sent["messages"][1]["content"][1]["image_url"]["url"] == image.data_url


def test_identification_fallbacks():
    record = PlantIdentification.from_suggestion(
        user_id="u1",
        image_url="data:image/png;base64,AAAA",
        suggestion=PlantSuggestion(scientific_name="Ficus lyrata", confidence=70),
        provider="plant_id",
    )

    assert record.common_name == "Ficus lyrata"
    assert record.description == "No description available"
    assert record.origin == "Unknown"
    assert record.type == "Plant"
    assert record.family is None


class TestClassifierRegistry:
    def test_only_providers_with_keys_are_registered(self):
        registry = build_classifier_registry(Settings(OPENAI_API_KEY="sk-test", PLANT_ID_API_KEY=None))

        assert registry.provider_names == ["openai"]

    def test_priorities_from_settings(self):
        registry = build_classifier_registry(
            Settings(PLANT_ID_API_KEY="p", OPENAI_API_KEY="o", PLANT_ID_PRIORITY=2, OPENAI_PRIORITY=1)
        )

        assert registry.provider_names == ["openai", "plant_id"]

    async def test_no_providers(self, image):
        with pytest.raises(ExternalServiceError) as exc_info:
            await ClassifierRegistry().identify(image)

        assert exc_info.value.status_code == 503

    async def test_failover_to_next_provider(self, image):
        broken = FakeClassifier("plant_id", error=ExternalAPIError("Plant.id returned 500", api_name="plant_id"))
        backup = FakeClassifier("openai", suggestion=monstera())

        result = await make_registry(broken, backup).identify(image)

        assert result.endpoint_name == "openai"
        assert result.value.scientific_name == "Monstera deliciosa"

    async def test_no_plant_stops_rotation(self, image):
        empty = FakeClassifier("plant_id", suggestion=None)
        backup = FakeClassifier("openai", suggestion=monstera())

        result = await make_registry(empty, backup).identify(image)

        assert result.value is None
        assert backup.calls == 0

    async def test_all_providers_failed(self, image):
        registry = make_registry(
            FakeClassifier("plant_id", error=ExternalAPIError("down")),
            FakeClassifier("openai", error=ExternalAPIError("down")),
        )

        with pytest.raises(APIRotationError):
            await registry.identify(image)

    async def test_close_closes_every_client(self):
        first, second = FakeClassifier("plant_id"), FakeClassifier("openai")
        registry = make_registry(first, second)

        await registry.close()

        assert first.closed and second.closed
