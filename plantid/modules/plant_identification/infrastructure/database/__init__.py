# 📄 File: plantid/modules/plant_identification/infrastructure/database/__init__.py
# 🧭 Purpose (Layman Explanation):
# Database storage for identification results
# 🧪 Purpose (Technical Summary):
# Exports the ORM model and SQLAlchemy repository implementation
# 🔗 Dependencies:
# models, plant_identification_repository_impl
# 🔄 Connected Modules / Calls From:
# presentation.dependencies, DatabaseConnectionManager.create_tables

from .models import PlantIdentificationModel
from .plant_identification_repository_impl import PlantIdentificationRepositoryImpl

__all__ = ["PlantIdentificationModel", "PlantIdentificationRepositoryImpl"]
