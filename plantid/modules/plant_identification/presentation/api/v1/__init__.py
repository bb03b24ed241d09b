# 📄 File: plantid/modules/plant_identification/presentation/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# Version 1 of the identification endpoints
# 🧪 Purpose (Technical Summary):
# Exports the identification router for inclusion under /api
# 🔗 Dependencies:
# identification
# 🔄 Connected Modules / Calls From:
# plantid.api.v1.router

from .identification import identification_router

__all__ = ["identification_router"]
