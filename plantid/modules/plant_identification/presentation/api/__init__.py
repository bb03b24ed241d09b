# 📄 File: plantid/modules/plant_identification/presentation/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# The web-facing side of plant identification
# 🧪 Purpose (Technical Summary):
# Presentation layer: FastAPI routers, schemas and dependency providers
# 🔗 Dependencies:
# FastAPI
# 🔄 Connected Modules / Calls From:
# plantid.api.v1.router
