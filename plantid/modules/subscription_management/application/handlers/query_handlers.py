# 📄 File: plantid/modules/subscription_management/application/handlers/query_handlers.py
# 🧭 Purpose (Layman Explanation):
# Answers "how much has this user used?" without changing anything.
# 🧪 Purpose (Technical Summary):
# CQRS query handler returning the usage snapshot; reads never mutate stored counters.
# 🔗 Dependencies:
# GetUsageQuery, UsageService
# 🔄 Connected Modules / Calls From:
# plantid.modules.subscription_management.presentation.api.v1.usage

import logging

from plantid.modules.subscription_management.application.queries.get_usage import GetUsageQuery
from plantid.modules.subscription_management.domain.models.user_usage import UsageSnapshot
from plantid.modules.subscription_management.domain.services.usage_service import UsageService

logger = logging.getLogger(__name__)


class GetUsageQueryHandler:
    """Handler for the usage snapshot query."""

    def __init__(self, usage_service: UsageService):
        self._usage_service = usage_service

    async def handle(self, query: GetUsageQuery) -> UsageSnapshot:
        snapshot = await self._usage_service.snapshot(query.user_id)
        logger.debug(f"Usage for {query.user_id}: daily={snapshot.daily_count} premium={snapshot.is_premium}")
        return snapshot
