# 📄 File: plantid/modules/plant_identification/infrastructure/external/openai_vision_client.py
# 🧭 Purpose (Layman Explanation):
# Asks OpenAI's image-understanding model what plant is in the photo, requesting a strict
# JSON answer that we then turn into our own plant result.
#
# 🧪 Purpose (Technical Summary):
# PlantClassifier adapter for OpenAI chat completions with image input. Sends a JSON-object
# system prompt plus the photo as a data URL, and parses the JSON reply into PlantSuggestion.
#
# 🔗 Dependencies:
# - plantid.shared.infrastructure.external_apis.api_client (APIClient, Bearer auth)
# - json
#
# 🔄 Connected Modules / Calls From:
# - provider_registry.py (rotation endpoint "openai")

import json
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from plantid.modules.plant_identification.domain.models.plant_identification import (
    PlantSuggestion,
    confidence_from_probability,
)
from plantid.modules.plant_identification.domain.services.plant_classifier import PlantClassifier
from plantid.shared.infrastructure.external_apis.api_client import APIClient
from plantid.shared.utils.logging import get_logger
from plantid.shared.utils.validators import ImagePayload

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a botanist identifying plants from photos. "
    "Respond with a single JSON object only. If the photo shows a plant, use the keys: "
    '"scientificName" (string), "commonName" (string), "confidence" (integer 0-100), '
    '"family" (string), "description" (one or two sentences), "origin" (native region), '
    '"type" (e.g. tree, shrub, succulent, herb). '
    'If no plant can be identified, respond with {"identified": false}.'
)

USER_PROMPT = "Identify the plant in this photo."


def build_openai_payload(image_data_url: str, model: str, max_tokens: int) -> Dict[str, Any]:
    """Chat completion request with the image attached as a data URL."""
    return {
        "model": model,
        "max_tokens": max_tokens,
        "response_format": {"type": "json_object"},
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": USER_PROMPT},
                    {"type": "image_url", "image_url": {"url": image_data_url}},
                ],
            },
        ],
    }


def _confidence(value: Any) -> int:
    # The prompt asks for 0-100, but some replies use a 0-1 probability
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if 0 <= number <= 1:
        return confidence_from_probability(number)
    return confidence_from_probability(number / 100)


def parse_openai_response(data: Dict[str, Any]) -> Optional[PlantSuggestion]:
    """
    Parse the JSON object in the first choice.

    Returns:
        Optional[PlantSuggestion]: None when the reply is not parseable or reports no plant
    """
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.warning("OpenAI response has no message content")
        return None

    try:
        result = json.loads(content or "")
    except (TypeError, ValueError):
        logger.warning("OpenAI response is not valid JSON")
        return None

    if not isinstance(result, dict) or result.get("identified") is False:
        return None

    name = result.get("scientificName")
    if not isinstance(name, str) or not name.strip():
        return None

    try:
        return PlantSuggestion(
            scientific_name=name,
            common_name=result.get("commonName") or None,
            confidence=_confidence(result.get("confidence")),
            family=result.get("family") or None,
            description=result.get("description") or None,
            origin=result.get("origin") or None,
            type=result.get("type") or None,
        )
    except PydanticValidationError as e:
        logger.warning(f"OpenAI response has unexpected field types: {e}")
        return None


class OpenAIVisionClient(PlantClassifier):
    """
    OpenAI vision classifier (Bearer auth).
    """

    name = "openai"

    def __init__(self, api_key: str, api_url: str, model: str, max_tokens: int = 500, timeout: int = 30):
        self.model = model
        self.max_tokens = max_tokens
        self.client = APIClient(
            base_url=api_url,
            api_key=api_key,
            api_name=self.name,
            timeout=timeout
        )

    async def identify(self, image: ImagePayload) -> Optional[PlantSuggestion]:
        data = await self.client.post(data=build_openai_payload(image.data_url, self.model, self.max_tokens))
        suggestion = parse_openai_response(data)

        if suggestion is None:
            logger.info("OpenAI vision did not identify a plant")
        return suggestion

    async def close(self) -> None:
        await self.client.close()

    def get_stats(self) -> Dict[str, Any]:
        return {**self.client.get_stats(), "model": self.model}

    def get_recent_errors(self, limit: int = 5) -> List[Dict[str, Any]]:
        return self.client.get_recent_errors(limit)
