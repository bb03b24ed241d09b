# 📄 File: plantid/modules/plant_identification/infrastructure/database/plant_identification_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves identification results and fetches a user's most recent ones.
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of PlantIdentificationRepository with newest-first, limited history queries.
# 🔗 Dependencies:
# SQLAlchemy async session, PlantIdentificationModel, PlantIdentification, plantid.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# plant_identification.presentation.dependencies

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from plantid.modules.plant_identification.domain.models.plant_identification import PlantIdentification
from plantid.modules.plant_identification.domain.repositories.plant_identification_repository import (
    PlantIdentificationRepository,
)
from plantid.modules.plant_identification.infrastructure.database.models import PlantIdentificationModel
from plantid.shared.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class PlantIdentificationRepositoryImpl(PlantIdentificationRepository):
    """
    SQLAlchemy implementation of the identification repository.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, identification: PlantIdentification) -> PlantIdentification:
        try:
            model = PlantIdentificationModel(**identification.model_dump(exclude={"id"}))
            self.session.add(model)
            await self.session.flush()  # Get the generated ID
            await self.session.refresh(model)

            logger.info(f"✅ Stored identification {model.id} for user {model.user_id}")
            return PlantIdentification.model_validate(model)

        except SQLAlchemyError as e:
            logger.error(f"❌ Error storing identification for user {identification.user_id}: {e}")
            raise DatabaseError(
                f"Failed to store identification: {e}",
                operation="insert",
                table="plant_identifications"
            )

    async def list_by_user(self, user_id: str, limit: int) -> List[PlantIdentification]:
        try:
            result = await self.session.execute(
                select(PlantIdentificationModel)
                .where(PlantIdentificationModel.user_id == user_id)
                # id breaks ties between records created within the same timestamp
                .order_by(PlantIdentificationModel.created_at.desc(), PlantIdentificationModel.id.desc())
                .limit(limit)
            )
            return [PlantIdentification.model_validate(model) for model in result.scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Error fetching history for user {user_id}: {e}")
            raise DatabaseError(
                f"Failed to fetch identification history: {e}",
                operation="select",
                table="plant_identifications"
            )
