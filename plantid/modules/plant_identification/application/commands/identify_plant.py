# 📄 File: plantid/modules/plant_identification/application/commands/identify_plant.py
# 🧭 Purpose (Layman Explanation):
# The "what plant is this?" request: the photo, who is asking, and optionally which service to use.
#
# 🧪 Purpose (Technical Summary):
# CQRS command for a plant identification. The image stays base64 text here; decoding and
# validation happen in the handler so failures map onto the API error envelope.
#
# 🔗 Dependencies:
# - pydantic
# - plantid.shared.utils.validators (user id validation)
#
# 🔄 Connected Modules / Calls From:
# - IdentifyPlantCommandHandler
# - plant_identification.presentation.api.v1.identification

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from plantid.shared.utils.validators import validate_user_id


class IdentifyPlantCommand(BaseModel):
    """Command for identifying the plant in a photo."""

    image_base64: str = Field(..., description="Base64 image, optionally with a data URL prefix")
    user_id: str = Field(..., description="Opaque client user id")
    provider: Optional[str] = Field(None, description="Pin one classifier instead of rotating")

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)
