# 📄 File: plantid/modules/plant_identification/application/handlers/query_handlers.py
# 🧭 Purpose (Layman Explanation):
# Fetches a user's recent identifications, newest first.
# 🧪 Purpose (Technical Summary):
# CQRS query handler for identification history with default and maximum page sizes.
# 🔗 Dependencies:
# GetHistoryQuery, PlantIdentificationRepository
# 🔄 Connected Modules / Calls From:
# plant_identification.presentation.api.v1.identification (GET /api/history/{userId})

import logging
from typing import List

from plantid.modules.plant_identification.application.queries.get_history import GetHistoryQuery
from plantid.modules.plant_identification.domain.models.plant_identification import PlantIdentification
from plantid.modules.plant_identification.domain.repositories.plant_identification_repository import (
    PlantIdentificationRepository,
)

logger = logging.getLogger(__name__)


class GetHistoryQueryHandler:
    """
    Handler for identification history.

    A missing limit uses ``default_limit``; larger limits are capped at ``max_limit``.
    """

    def __init__(self, repository: PlantIdentificationRepository, default_limit: int = 10, max_limit: int = 50):
        self._repository = repository
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def handle(self, query: GetHistoryQuery) -> List[PlantIdentification]:
        limit = min(query.limit or self._default_limit, self._max_limit)
        history = await self._repository.list_by_user(query.user_id, limit)
        logger.debug(f"History for {query.user_id}: {len(history)} records (limit {limit})")
        return history
