# 📄 File: plantid/modules/plant_identification/presentation/api/schemas/__init__.py
# 🧭 Purpose (Layman Explanation):
# Message formats for identification endpoints
# 🧪 Purpose (Technical Summary):
# Exports the identification API schemas
# 🔗 Dependencies:
# identification_schemas
# 🔄 Connected Modules / Calls From:
# presentation.api.v1.identification

from .identification_schemas import IdentificationResponse, IdentifyPlantRequest, IdentifyPlantResponse

__all__ = [
    "IdentificationResponse",
    "IdentifyPlantRequest",
    "IdentifyPlantResponse",
]
