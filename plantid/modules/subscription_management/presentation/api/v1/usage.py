# 📄 File: plantid/modules/subscription_management/presentation/api/v1/usage.py
# 🧭 Purpose (Layman Explanation):
# The endpoint the app calls to show "2 of 3 free identifications left today".
# 🧪 Purpose (Technical Summary):
# FastAPI read endpoint returning the usage snapshot for a user id (camelCase JSON).
# 🔗 Dependencies:
# FastAPI router, GetUsageQueryHandler, usage schemas
# 🔄 Connected Modules / Calls From:
# plantid.api.v1.router (mounted under /api)

import logging

from fastapi import APIRouter, Depends, Path

from plantid.modules.subscription_management.application.handlers.query_handlers import GetUsageQueryHandler
from plantid.modules.subscription_management.application.queries.get_usage import GetUsageQuery
from plantid.modules.subscription_management.presentation.api.schemas.subscription_schemas import UsageResponse
from plantid.modules.subscription_management.presentation.dependencies import get_usage_query_handler
from plantid.shared.utils.validators import USER_ID_PATTERN

logger = logging.getLogger(__name__)

usage_router = APIRouter(tags=["Usage"])


@usage_router.get(
    "/usage/{userId}",
    response_model=UsageResponse,
    summary="Get usage",
    description="Current usage counters, remaining free identifications and premium state",
    responses={
        200: {"description": "Usage snapshot"},
        422: {"description": "Invalid user id"},
    }
)
async def get_usage(
    user_id: str = Path(..., alias="userId", pattern=USER_ID_PATTERN.pattern),
    handler: GetUsageQueryHandler = Depends(get_usage_query_handler),
) -> UsageResponse:
    """
    Get a user's usage snapshot.

    Users never seen before get the default snapshot; nothing is created.
    """
    return await handler.handle(GetUsageQuery(user_id=user_id))
