# 📄 File: plantid/modules/subscription_management/application/queries/get_usage.py
# 🧭 Purpose (Layman Explanation):
# Asks "how many identifications has this user made, and how many are left?"
# 🧪 Purpose (Technical Summary):
# CQRS read query for the public usage snapshot of one user.
# 🔗 Dependencies:
# pydantic, plantid.shared.utils.validators
# 🔄 Connected Modules / Calls From:
# GetUsageQueryHandler, presentation.api.v1.usage

from pydantic import BaseModel, field_validator

from plantid.shared.utils.validators import validate_user_id


class GetUsageQuery(BaseModel):
    """Query for a user's usage snapshot."""

    user_id: str

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)
