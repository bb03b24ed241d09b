# 📄 File: plantid/modules/plant_identification/domain/models/__init__.py
# 🧭 Purpose (Layman Explanation):
# The core objects of plant identification
# 🧪 Purpose (Technical Summary):
# Exports PlantSuggestion, PlantIdentification and the probability conversion helper
# 🔗 Dependencies:
# plant_identification
# 🔄 Connected Modules / Calls From:
# Classifier clients, handlers, repositories, schemas

from .plant_identification import PlantIdentification, PlantSuggestion, confidence_from_probability

__all__ = [
    "PlantIdentification",
    "PlantSuggestion",
    "confidence_from_probability",
]
