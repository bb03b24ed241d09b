# 📄 File: plantid/modules/plant_identification/application/queries/__init__.py
# 🧭 Purpose (Layman Explanation):
# The read requests plant identification answers
# 🧪 Purpose (Technical Summary):
# Exports CQRS query definitions
# 🔗 Dependencies:
# get_history
# 🔄 Connected Modules / Calls From:
# Query handlers, presentation routes

from .get_history import GetHistoryQuery

__all__ = ["GetHistoryQuery"]
