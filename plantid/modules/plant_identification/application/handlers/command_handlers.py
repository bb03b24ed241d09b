# 📄 File: plantid/modules/plant_identification/application/handlers/command_handlers.py
# 🧭 Purpose (Layman Explanation):
# Runs a plant identification from start to finish: checks the photo, makes sure the user still
# has identifications left, asks the recognition services, saves the result and counts the use.
#
# 🧪 Purpose (Technical Summary):
# CQRS command handler orchestrating image validation, quota enforcement (UsageService),
# classifier rotation (ClassifierRegistry) and persistence. Usage is only recorded after
# a successful classification, inside the same request transaction.
#
# 🔗 Dependencies:
# - plantid.shared.utils.validators (decode_image_payload)
# - plantid.modules.subscription_management.domain.services.usage_service (UsageService)
# - plant_identification.infrastructure.external.provider_registry (ClassifierRegistry)
# - plant_identification.domain.repositories (PlantIdentificationRepository)
#
# 🔄 Connected Modules / Calls From:
# - plant_identification.presentation.api.v1.identification (POST /api/identify-plant)

__all__ = [
    "IdentificationResult",
    "IdentifyPlantCommandHandler",
]

import time
from dataclasses import dataclass

from plantid.modules.plant_identification.application.commands.identify_plant import IdentifyPlantCommand
from plantid.modules.plant_identification.domain.models.plant_identification import PlantIdentification
from plantid.modules.plant_identification.domain.repositories.plant_identification_repository import (
    PlantIdentificationRepository,
)
from plantid.modules.plant_identification.infrastructure.external.provider_registry import ClassifierRegistry
from plantid.modules.subscription_management.domain.models.user_usage import UsageSnapshot
from plantid.modules.subscription_management.domain.services.usage_service import UsageService
from plantid.shared.core.exceptions import PlantNotIdentifiedError
from plantid.shared.utils.logging import get_logger
from plantid.shared.utils.validators import decode_image_payload

logger = get_logger(__name__)


@dataclass
class IdentificationResult:
    """Stored identification plus the user's usage after counting it."""
    identification: PlantIdentification
    usage: UsageSnapshot


class IdentifyPlantCommandHandler:
    """
    Handles the identify-plant command.
    """

    def __init__(
        self,
        usage_service: UsageService,
        repository: PlantIdentificationRepository,
        registry: ClassifierRegistry,
        max_image_size: int,
    ):
        self._usage_service = usage_service
        self._repository = repository
        self._registry = registry
        self._max_image_size = max_image_size

    async def handle(self, command: IdentifyPlantCommand) -> IdentificationResult:
        """
        Identify a plant and count the identification against the user's quota.

        Steps:
            1. Decode and validate the image
            2. Check the quota
            3. Classify through the provider rotation
            4. Persist the result and record usage

        Raises:
            ValidationError / InvalidFileTypeError: Bad image payload (400)
            UsageLimitExceededError: Daily or monthly limit reached (429)
            SubscriptionError: Trial over and subscription required (402)
            PlantNotIdentifiedError: No plant found in the photo (400)
            ExternalServiceError: No provider configured (503)
            APIRotationError: All providers failed (502)
        """
        start_time = time.time()

        image = decode_image_payload(command.image_base64, self._max_image_size)
        logger.debug(
            f"Image accepted for {command.user_id}: {image.mime_type} "
            f"{image.width}x{image.height}, {image.size_bytes} bytes"
        )

        await self._usage_service.check_quota(command.user_id)

        result = await self._registry.identify(image, command.provider)
        suggestion = result.value
        if suggestion is None:
            raise PlantNotIdentifiedError(provider=result.endpoint_name)

        identification = await self._repository.create(
            PlantIdentification.from_suggestion(
                user_id=command.user_id,
                image_url=image.data_url,
                suggestion=suggestion,
                provider=result.endpoint_name,
            )
        )
        usage = await self._usage_service.record_identification(command.user_id)

        logger.log_business_event(
            "plant_identified",
            f"✅ Identified {identification.scientific_name} ({identification.confidence}%) "
            f"via {result.endpoint_name} in {(time.time() - start_time) * 1000:.0f}ms",
            user_id=command.user_id,
            extra={
                "identification_id": identification.id,
                "provider": result.endpoint_name,
                "attempted": result.attempted,
            },
        )

        return IdentificationResult(identification=identification, usage=usage)
