# 📄 File: plantid/modules/plant_identification/application/commands/__init__.py
# 🧭 Purpose (Layman Explanation):
# The write requests plant identification accepts
# 🧪 Purpose (Technical Summary):
# Exports CQRS command definitions
# 🔗 Dependencies:
# identify_plant
# 🔄 Connected Modules / Calls From:
# Command handlers, presentation routes

from .identify_plant import IdentifyPlantCommand

__all__ = ["IdentifyPlantCommand"]
