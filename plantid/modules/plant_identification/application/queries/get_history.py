# 📄 File: plantid/modules/plant_identification/application/queries/get_history.py
# 🧭 Purpose (Layman Explanation):
# Asks for a user's most recent identifications.
# 🧪 Purpose (Technical Summary):
# CQRS read query for identification history; ``limit`` is optional and bounded by the handler.
# 🔗 Dependencies:
# pydantic, plantid.shared.utils.validators
# 🔄 Connected Modules / Calls From:
# GetHistoryQueryHandler, presentation.api.v1.identification

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from plantid.shared.utils.validators import validate_user_id


class GetHistoryQuery(BaseModel):
    """Query for a user's identification history."""

    user_id: str
    limit: Optional[int] = Field(None, ge=1)

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)
