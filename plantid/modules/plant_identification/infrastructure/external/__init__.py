# 📄 File: plantid/modules/plant_identification/infrastructure/external/__init__.py
# 🧭 Purpose (Layman Explanation):
# Connections to the outside plant recognition services
# 🧪 Purpose (Technical Summary):
# Exports the Plant.id and OpenAI Vision adapters and the classifier registry
# 🔗 Dependencies:
# plant_id_client, openai_vision_client, provider_registry
# 🔄 Connected Modules / Calls From:
# plantid.main, presentation dependencies

from .openai_vision_client import OpenAIVisionClient
from .plant_id_client import PlantIdClient
from .provider_registry import ClassifierRegistry, build_classifier_registry

__all__ = [
    "ClassifierRegistry",
    "OpenAIVisionClient",
    "PlantIdClient",
    "build_classifier_registry",
]
