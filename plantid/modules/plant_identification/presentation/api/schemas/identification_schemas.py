# 📄 File: plantid/modules/plant_identification/presentation/api/schemas/identification_schemas.py
# 🧭 Purpose (Layman Explanation):
# The shapes of the messages for identifying a plant and listing past identifications.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas (camelCase on the wire) for POST /api/identify-plant
# and GET /api/history/{userId}.
#
# 🔗 Dependencies:
# - pydantic (alias generator to_camel)
# - subscription_management UsageSnapshot (usage block of the identify response)
#
# 🔄 Connected Modules / Calls From:
# - plant_identification.presentation.api.v1.identification

"""
Plant Identification API Schemas

Request Schemas:
- IdentifyPlantRequest: imageBase64, userId, optional provider

Response Schemas:
- IdentificationResponse: one stored identification
- IdentifyPlantResponse: identification plus the updated usage snapshot
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from plantid.modules.plant_identification.domain.models.plant_identification import PlantIdentification
from plantid.modules.subscription_management.domain.models.user_usage import UsageSnapshot
from plantid.shared.utils.validators import validate_user_id


class IdentifyPlantRequest(BaseModel):
    """Request body for plant identification."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_base64: str = Field(..., min_length=1, description="Base64 photo, data URL prefix allowed")
    user_id: str = Field(..., description="Opaque client user id")
    provider: Optional[str] = Field(None, description="Classifier to use (plant_id, openai)")

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)


class IdentificationResponse(BaseModel):
    """Stored identification."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    user_id: str
    image_url: str
    scientific_name: str
    common_name: Optional[str] = None
    confidence: int
    family: Optional[str] = None
    description: Optional[str] = None
    origin: Optional[str] = None
    type: Optional[str] = None
    provider: str
    created_at: datetime

    @classmethod
    def from_domain(cls, identification: PlantIdentification) -> "IdentificationResponse":
        return cls.model_validate(identification.model_dump())


class IdentifyPlantResponse(BaseModel):
    """Identification result plus usage after counting it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    identification: IdentificationResponse
    usage: UsageSnapshot
