# 📄 File: plantid/modules/plant_identification/domain/models/plant_identification.py
# 🧭 Purpose (Layman Explanation):
# Describes a plant guess from a classification service and the saved record of each identification
# a user made: the plant's names, how sure the service was, its family and a short description.
#
# 🧪 Purpose (Technical Summary):
# Pydantic domain models: PlantSuggestion (provider-neutral classifier output) and PlantIdentification
# (persisted record keyed by an auto-incrementing id), with the field fallbacks applied on creation.
#
# 🔗 Dependencies:
# pydantic, datetime, typing
#
# 🔄 Connected Modules / Calls From:
# Classifier clients (produce PlantSuggestion), IdentifyPlantCommandHandler, repositories, API schemas

"""
Plant Identification Domain Models

- PlantSuggestion: best guess returned by a classifier
- PlantIdentification: one stored identification for a user

Record fallbacks:
- common_name: scientific name
- description: "No description available"
- origin: "Unknown"
- type: "Plant"
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DESCRIPTION = "No description available"
DEFAULT_ORIGIN = "Unknown"
DEFAULT_TYPE = "Plant"


def confidence_from_probability(probability: Any) -> int:
    """Convert a 0..1 probability to an integer percentage, rounding halves up."""
    try:
        value = float(probability)
    except (TypeError, ValueError):
        return 0
    if math.isnan(value):
        return 0
    return max(0, min(100, math.floor(value * 100 + 0.5)))


class PlantSuggestion(BaseModel):
    """Provider-neutral classification result."""

    scientific_name: str = Field(..., min_length=1)
    common_name: Optional[str] = None
    confidence: int = Field(default=0, ge=0, le=100)
    family: Optional[str] = None
    description: Optional[str] = None
    origin: Optional[str] = None
    type: Optional[str] = None

    @field_validator("scientific_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("scientific_name must not be blank")
        return v


class PlantIdentification(BaseModel):
    """
    Stored identification for a user.

    ``image_url`` holds the submitted photo as a data URL.
    """

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    user_id: str
    image_url: str
    scientific_name: str
    common_name: Optional[str] = None
    confidence: int = Field(..., ge=0, le=100)
    family: Optional[str] = None
    description: Optional[str] = None
    origin: Optional[str] = None
    type: Optional[str] = None
    provider: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_suggestion(
        cls,
        user_id: str,
        image_url: str,
        suggestion: PlantSuggestion,
        provider: str
    ) -> "PlantIdentification":
        """Build a new record from a classifier suggestion, applying the field fallbacks."""
        return cls(
            user_id=user_id,
            image_url=image_url,
            scientific_name=suggestion.scientific_name,
            common_name=suggestion.common_name or suggestion.scientific_name,
            confidence=suggestion.confidence,
            family=suggestion.family,
            description=suggestion.description or DEFAULT_DESCRIPTION,
            origin=suggestion.origin or DEFAULT_ORIGIN,
            type=suggestion.type or DEFAULT_TYPE,
            provider=provider,
        )
