# 📄 File: plantid/modules/subscription_management/presentation/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# The web-facing side of the subscription feature
# 🧪 Purpose (Technical Summary):
# Presentation layer: FastAPI routers, schemas and dependency providers
# 🔗 Dependencies:
# FastAPI
# 🔄 Connected Modules / Calls From:
# plantid.api.v1.router
