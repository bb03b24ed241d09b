# 📄 File: plantid/modules/plant_identification/domain/repositories/plant_identification_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines how identification results are saved and how a user's past identifications are looked up.
# 🧪 Purpose (Technical Summary):
# Repository interface for PlantIdentification entities (Repository pattern, dependency inversion).
# 🔗 Dependencies:
# abc, typing, PlantIdentification domain model
# 🔄 Connected Modules / Calls From:
# IdentifyPlantCommandHandler, GetHistoryQueryHandler, plant_identification_repository_impl.py

from abc import ABC, abstractmethod
from typing import List

from ..models.plant_identification import PlantIdentification


class PlantIdentificationRepository(ABC):
    """Repository interface for identification records."""

    @abstractmethod
    async def create(self, identification: PlantIdentification) -> PlantIdentification:
        """
        Persist a new identification.

        Returns:
            PlantIdentification: Stored record with its generated id
        """
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str, limit: int) -> List[PlantIdentification]:
        """Identifications for a user, newest first, at most ``limit`` records."""
        pass
