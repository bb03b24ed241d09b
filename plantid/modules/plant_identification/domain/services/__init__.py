# 📄 File: plantid/modules/plant_identification/domain/services/__init__.py
# 🧭 Purpose (Layman Explanation):
# Business-level contracts for plant identification
# 🧪 Purpose (Technical Summary):
# Exports the PlantClassifier port
# 🔗 Dependencies:
# plant_classifier
# 🔄 Connected Modules / Calls From:
# Classifier adapters, provider registry

from .plant_classifier import PlantClassifier

__all__ = ["PlantClassifier"]
