# 📄 File: plantid/modules/plant_identification/domain/repositories/__init__.py
# 🧭 Purpose (Layman Explanation):
# Data access contracts for identification records
# 🧪 Purpose (Technical Summary):
# Exports repository interfaces
# 🔗 Dependencies:
# plant_identification_repository
# 🔄 Connected Modules / Calls From:
# Application handlers, infrastructure implementations

from .plant_identification_repository import PlantIdentificationRepository

__all__ = ["PlantIdentificationRepository"]
