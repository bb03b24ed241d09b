# 📄 File: plantid/modules/plant_identification/domain/services/plant_classifier.py
# 🧭 Purpose (Layman Explanation):
# The common shape every plant recognition service must have, so they can be swapped or used as backups.
# 🧪 Purpose (Technical Summary):
# Abstract classifier port implemented by the Plant.id and OpenAI Vision adapters.
# 🔗 Dependencies:
# abc, PlantSuggestion, ImagePayload
# 🔄 Connected Modules / Calls From:
# infrastructure.external clients, provider_registry

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from plantid.modules.plant_identification.domain.models.plant_identification import PlantSuggestion
from plantid.shared.utils.validators import ImagePayload


class PlantClassifier(ABC):
    """
    A third-party plant classification service.

    ``identify`` returns None when the service answered but found no plant;
    upstream failures are raised as ExternalAPIError subclasses.
    """

    name: str = "classifier"

    @abstractmethod
    async def identify(self, image: ImagePayload) -> Optional[PlantSuggestion]:
        pass

    async def close(self) -> None:
        pass

    def get_stats(self) -> Dict[str, Any]:
        return {"name": self.name}

    def get_recent_errors(self, limit: int = 5) -> List[Dict[str, Any]]:
        return []
