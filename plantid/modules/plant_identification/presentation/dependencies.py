# 📄 File: plantid/modules/plant_identification/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Wires together what the identification endpoints need: the database, the recognition services
# and the usage counter.
# 🧪 Purpose (Technical Summary):
# Module-specific FastAPI dependency providers for the identification repository, the classifier
# registry (held on app.state) and the CQRS handlers; overridable via app.dependency_overrides.
# 🔗 Dependencies:
# FastAPI, SQLAlchemy AsyncSession, subscription_management.presentation.dependencies
# 🔄 Connected Modules / Calls From:
# plant_identification.presentation.api.v1.identification

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from plantid.modules.plant_identification.application.handlers.command_handlers import IdentifyPlantCommandHandler
from plantid.modules.plant_identification.application.handlers.query_handlers import GetHistoryQueryHandler
from plantid.modules.plant_identification.domain.repositories.plant_identification_repository import (
    PlantIdentificationRepository,
)
from plantid.modules.plant_identification.infrastructure.database.plant_identification_repository_impl import (
    PlantIdentificationRepositoryImpl,
)
from plantid.modules.plant_identification.infrastructure.external.provider_registry import (
    ClassifierRegistry,
    build_classifier_registry,
)
from plantid.modules.subscription_management.domain.services.usage_service import UsageService
from plantid.modules.subscription_management.presentation.dependencies import get_usage_service
from plantid.shared.config.settings import Settings
from plantid.shared.core.dependencies import get_app_settings, get_db


def get_identification_repository(db: AsyncSession = Depends(get_db)) -> PlantIdentificationRepository:
    return PlantIdentificationRepositoryImpl(db)


def get_classifier_registry(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> ClassifierRegistry:
    """Registry built at startup; built on first use when the lifespan did not run."""
    registry = getattr(request.app.state, "classifier_registry", None)
    if registry is None:
        registry = build_classifier_registry(settings)
        request.app.state.classifier_registry = registry
    return registry


def get_identify_plant_handler(
    usage_service: UsageService = Depends(get_usage_service),
    repository: PlantIdentificationRepository = Depends(get_identification_repository),
    registry: ClassifierRegistry = Depends(get_classifier_registry),
    settings: Settings = Depends(get_app_settings),
) -> IdentifyPlantCommandHandler:
    return IdentifyPlantCommandHandler(
        usage_service=usage_service,
        repository=repository,
        registry=registry,
        max_image_size=settings.MAX_IMAGE_SIZE,
    )


def get_history_query_handler(
    repository: PlantIdentificationRepository = Depends(get_identification_repository),
    settings: Settings = Depends(get_app_settings),
) -> GetHistoryQueryHandler:
    return GetHistoryQueryHandler(
        repository,
        default_limit=settings.HISTORY_DEFAULT_LIMIT,
        max_limit=settings.HISTORY_MAX_LIMIT,
    )
