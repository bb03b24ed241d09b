# 📄 File: plantid/modules/plant_identification/infrastructure/external/provider_registry.py
# 🧭 Purpose (Layman Explanation):
# Keeps the list of plant recognition services we have keys for, in order of preference,
# and moves on to the next one when a service is down.
#
# 🧪 Purpose (Technical Summary):
# Builds the classifier rotation from settings (providers without an API key are skipped), wraps each
# provider in a circuit breaker via APIRotationManager, and exposes identify() with optional pinning.
#
# 🔗 Dependencies:
# - plantid.shared.infrastructure.external_apis (APIRotationManager, CircuitBreakerConfig)
# - plant_id_client, openai_vision_client
# - plantid.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - plantid.main (lifespan builds and closes the registry)
# - plant_identification.presentation.dependencies (request-time access)

from typing import Any, Dict, List, Optional

from plantid.modules.plant_identification.domain.models.plant_identification import PlantSuggestion
from plantid.modules.plant_identification.domain.services.plant_classifier import PlantClassifier
from plantid.modules.plant_identification.infrastructure.external.openai_vision_client import OpenAIVisionClient
from plantid.modules.plant_identification.infrastructure.external.plant_id_client import PlantIdClient
from plantid.shared.config.settings import Settings
from plantid.shared.core.exceptions import ExternalServiceError
from plantid.shared.infrastructure.external_apis.api_rotation import APIRotationManager, RotationResult
from plantid.shared.infrastructure.external_apis.circuit_breaker import CircuitBreakerConfig
from plantid.shared.utils.logging import get_logger
from plantid.shared.utils.validators import ImagePayload

logger = get_logger(__name__)

ROTATION_CATEGORY = "plant_identification"


class ClassifierRegistry:
    """
    Ordered set of classifiers behind one rotation manager.
    """

    def __init__(self, circuit_breaker_config: Optional[CircuitBreakerConfig] = None):
        self.rotation = APIRotationManager(ROTATION_CATEGORY)
        self.classifiers: Dict[str, PlantClassifier] = {}
        self._circuit_breaker_config = circuit_breaker_config

    def register(self, classifier: PlantClassifier, priority: int = 1) -> None:
        self.classifiers[classifier.name] = classifier
        self.rotation.add_endpoint(
            classifier.name,
            classifier,
            priority=priority,
            circuit_breaker_config=self._circuit_breaker_config
        )

    @property
    def provider_names(self) -> List[str]:
        return self.rotation.endpoint_names

    async def identify(
        self,
        image: ImagePayload,
        provider: Optional[str] = None
    ) -> RotationResult[Optional[PlantSuggestion]]:
        """
        Classify an image, failing over between providers.

        A provider answering "no plant" ends the rotation with a None value.

        Raises:
            ExternalServiceError: No provider is configured (503)
            ValidationError: ``provider`` is not a configured provider (400)
            APIRotationError: Every provider failed (502)
        """
        if not self.classifiers:
            raise ExternalServiceError(
                "No plant identification provider configured",
                service=ROTATION_CATEGORY
            )

        async def classify(classifier: PlantClassifier) -> Optional[PlantSuggestion]:
            return await classifier.identify(image)

        return await self.rotation.call_with_rotation(classify, preferred=provider)

    async def close(self) -> None:
        for classifier in self.classifiers.values():
            await classifier.close()

    def get_status(self) -> Dict[str, Any]:
        return {
            "providers": self.provider_names,
            "rotation": self.rotation.get_rotation_stats(),
            "clients": {name: c.get_stats() for name, c in self.classifiers.items()},
            "recent_errors": {name: c.get_recent_errors() for name, c in self.classifiers.items()},
        }


def build_classifier_registry(settings: Settings) -> ClassifierRegistry:
    """
    Register every provider that has an API key, ordered by configured priority.
    """
    registry = ClassifierRegistry(
        CircuitBreakerConfig(
            failure_threshold=settings.CIRCUIT_BREAKER_FAILURE_THRESHOLD,
            recovery_timeout=float(settings.CIRCUIT_BREAKER_RECOVERY_TIMEOUT),
        )
    )
    providers = settings.get_plant_api_config()

    plant_id = providers["plant_id"]
    if plant_id["api_key"]:
        registry.register(
            PlantIdClient(
                api_key=plant_id["api_key"],
                api_url=plant_id["api_url"],
                timeout=settings.EXTERNAL_API_TIMEOUT
            ),
            priority=plant_id["priority"]
        )

    openai = providers["openai"]
    if openai["api_key"]:
        registry.register(
            OpenAIVisionClient(
                api_key=openai["api_key"],
                api_url=openai["api_url"],
                model=openai["model"],
                max_tokens=openai["max_tokens"],
                timeout=settings.EXTERNAL_API_TIMEOUT
            ),
            priority=openai["priority"]
        )

    if registry.provider_names:
        logger.info(f"✅ Plant identification providers: {', '.join(registry.provider_names)}")
    else:
        logger.warning("No plant identification provider configured; identify requests will fail with 503")

    return registry
