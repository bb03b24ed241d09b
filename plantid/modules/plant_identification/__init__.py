# 📄 File: plantid/modules/plant_identification/__init__.py
# 🧭 Purpose (Layman Explanation):
# Everything about recognizing plants in photos and remembering past results
# 🧪 Purpose (Technical Summary):
# Feature module: identification domain, classifier adapters with failover, history, HTTP endpoints
# 🔗 Dependencies:
# FastAPI, SQLAlchemy, aiohttp, Pillow
# 🔄 Connected Modules / Calls From:
# plantid.api.v1.router, plantid.main

"""
Plant Identification Module

Layers:
- domain: PlantSuggestion, PlantIdentification, repository interface, classifier port
- application: identify command, history query, handlers
- infrastructure: SQLAlchemy repository, Plant.id / OpenAI Vision adapters, classifier registry
- presentation: /api/identify-plant, /api/history/{userId}
"""
