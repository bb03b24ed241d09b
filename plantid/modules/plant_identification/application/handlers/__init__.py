# 📄 File: plantid/modules/plant_identification/application/handlers/__init__.py
# 🧭 Purpose (Layman Explanation):
# The workers that carry out identification requests
# 🧪 Purpose (Technical Summary):
# Exports CQRS command and query handlers
# 🔗 Dependencies:
# command_handlers, query_handlers
# 🔄 Connected Modules / Calls From:
# Presentation dependencies and routes

from .command_handlers import IdentificationResult, IdentifyPlantCommandHandler
from .query_handlers import GetHistoryQueryHandler

__all__ = [
    "GetHistoryQueryHandler",
    "IdentificationResult",
    "IdentifyPlantCommandHandler",
]
