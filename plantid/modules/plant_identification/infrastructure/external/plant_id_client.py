# 📄 File: plantid/modules/plant_identification/infrastructure/external/plant_id_client.py
# 🧭 Purpose (Layman Explanation):
# Sends the user's photo to Plant.id, a plant recognition service, and turns its answer
# into our own plant result (names, confidence, family, description).
#
# 🧪 Purpose (Technical Summary):
# PlantClassifier adapter for the Plant.id v3 identification API over the shared APIClient
# (aiohttp + tenacity). Builds the request payload and maps the top suggestion onto PlantSuggestion.
#
# 🔗 Dependencies:
# - plantid.shared.infrastructure.external_apis.api_client (APIClient)
# - plantid.modules.plant_identification.domain (PlantClassifier, PlantSuggestion)
#
# 🔄 Connected Modules / Calls From:
# - provider_registry.py (rotation endpoint "plant_id")

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

PLANT_DETAILS = ["common_names", "url", "description", "taxonomy"]


def build_plant_id_payload(image_base64: str) -> Dict[str, Any]:
    """Request body for POST /v3/identification."""
    return {
        "images": [image_base64],
        "similar_images": True,
        "plant_details": PLANT_DETAILS,
    }


def parse_plant_id_response(data: Dict[str, Any]) -> Optional[PlantSuggestion]:
    """
    Map the top Plant.id suggestion onto a PlantSuggestion.

    Reads ``result.classification.suggestions[0]``:
    name, probability, details.common_names[0], details.taxonomy.{family,kingdom,class}
    and details.description.value.

    Returns:
        Optional[PlantSuggestion]: None when Plant.id returned no suggestion
    """
    classification = ((data or {}).get("result") or {}).get("classification") or {}
    suggestions = classification.get("suggestions") or []
    if not suggestions:
        return None

    top = suggestions[0]
    name = top.get("name") if isinstance(top, dict) else None
    if not isinstance(name, str) or not name.strip():
        return None

    try:
        details = top.get("details") or {}
        taxonomy = details.get("taxonomy") or {}
        common_names = details.get("common_names") or []
        description = details.get("description") or {}

        return PlantSuggestion(
            scientific_name=name.strip(),
            common_name=common_names[0] if common_names else None,
            confidence=confidence_from_probability(top.get("probability")),
            family=taxonomy.get("family"),
            description=description.get("value") if isinstance(description, dict) else None,
            origin=taxonomy.get("kingdom"),
            type=taxonomy.get("class"),
        )
    except (PydanticValidationError, AttributeError, TypeError, IndexError) as e:
        logger.warning(f"Plant.id response has unexpected field types: {e}")
        return None


class PlantIdClient(PlantClassifier):
    """
    Plant.id v3 classifier (``Api-Key`` header auth).
    """

    name = "plant_id"

    def __init__(self, api_key: str, api_url: str, timeout: int = 30):
        self.client = APIClient(
            base_url=api_url,
            api_key=api_key,
            api_name=self.name,
            timeout=timeout
        )

    async def identify(self, image: ImagePayload) -> Optional[PlantSuggestion]:
        data = await self.client.post(data=build_plant_id_payload(image.base64_data))
        suggestion = parse_plant_id_response(data)

        if suggestion is None:
            logger.info("Plant.id returned no plant suggestion")
        else:
            logger.debug(f"Plant.id suggestion: {suggestion.scientific_name} ({suggestion.confidence}%)")
        return suggestion

    async def close(self) -> None:
        await self.client.close()

    def get_stats(self) -> Dict[str, Any]:
        return self.client.get_stats()

    def get_recent_errors(self, limit: int = 5) -> List[Dict[str, Any]]:
        return self.client.get_recent_errors(limit)
