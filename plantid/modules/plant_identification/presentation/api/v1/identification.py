# 📄 File: plantid/modules/plant_identification/presentation/api/v1/identification.py
# 🧭 Purpose (Layman Explanation):
# The endpoints the app calls to identify a plant from a photo and to show past identifications.
#
# 🧪 Purpose (Technical Summary):
# FastAPI endpoints for plant identification (rate limited with slowapi) and history. Routes build
# CQRS messages and delegate to handlers; domain exceptions are rendered by global handlers.
#
# 🔗 Dependencies:
# - FastAPI router, Request, Path, Query
# - slowapi limiter (plantid.shared.core.rate_limiter)
# - plant_identification.application (commands, queries, handlers)
#
# 🔄 Connected Modules / Calls From:
# - plantid.api.v1.router (mounted under /api)

"""
Plant Identification API Endpoints

Endpoints:
- POST /identify-plant: identify the plant in a photo and count it against the quota
- GET /history/{userId}: recent identifications, newest first
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Request

from plantid.modules.plant_identification.application.commands.identify_plant import IdentifyPlantCommand
from plantid.modules.plant_identification.application.handlers.command_handlers import IdentifyPlantCommandHandler
from plantid.modules.plant_identification.application.handlers.query_handlers import GetHistoryQueryHandler
from plantid.modules.plant_identification.application.queries.get_history import GetHistoryQuery
from plantid.modules.plant_identification.presentation.api.schemas.identification_schemas import (
    IdentificationResponse,
    IdentifyPlantRequest,
    IdentifyPlantResponse,
)
from plantid.modules.plant_identification.presentation.dependencies import (
    get_history_query_handler,
    get_identify_plant_handler,
)
from plantid.shared.core.dependencies import bind_user_context
from plantid.shared.core.rate_limiter import identify_rate_limit, limiter
from plantid.shared.utils.validators import USER_ID_PATTERN

logger = logging.getLogger(__name__)

identification_router = APIRouter(tags=["Plant Identification"])


@identification_router.post(
    "/identify-plant",
    response_model=IdentifyPlantResponse,
    summary="Identify plant",
    description="Identify the plant in a base64 photo and return the stored result with updated usage",
    responses={
        200: {"description": "Plant identified"},
        400: {"description": "Invalid image or no plant identified"},
        402: {"description": "Trial ended, subscription required"},
        429: {"description": "Usage or rate limit reached"},
        502: {"description": "All classification providers failed"},
        503: {"description": "No classification provider configured"},
    }
)
@limiter.limit(identify_rate_limit)
async def identify_plant(
    request: Request,
    body: IdentifyPlantRequest,
    handler: IdentifyPlantCommandHandler = Depends(get_identify_plant_handler),
) -> IdentifyPlantResponse:
    """
    Identify a plant.

    Quota is consumed only when a plant was identified and stored.
    """
    bind_user_context(body.user_id)
    result = await handler.handle(
        IdentifyPlantCommand(
            image_base64=body.image_base64,
            user_id=body.user_id,
            provider=body.provider,
        )
    )
    return IdentifyPlantResponse(
        identification=IdentificationResponse.from_domain(result.identification),
        usage=result.usage,
    )


@identification_router.get(
    "/history/{userId}",
    response_model=List[IdentificationResponse],
    summary="Identification history",
    description="Most recent identifications for a user, newest first",
)
async def get_history(
    user_id: str = Path(..., alias="userId", pattern=USER_ID_PATTERN.pattern),
    limit: Optional[int] = Query(None, ge=1, description="Number of records (capped by HISTORY_MAX_LIMIT)"),
    handler: GetHistoryQueryHandler = Depends(get_history_query_handler),
) -> List[IdentificationResponse]:
    history = await handler.handle(GetHistoryQuery(user_id=user_id, limit=limit))
    return [IdentificationResponse.from_domain(item) for item in history]
