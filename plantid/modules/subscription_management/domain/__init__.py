# 📄 File: plantid/modules/subscription_management/domain/__init__.py
# 🧭 Purpose (Layman Explanation):
# The heart of the subscription feature: usage records and the rules that limit them
# 🧪 Purpose (Technical Summary):
# Domain layer (models, repository interfaces, services); free of web and database frameworks
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# Application and infrastructure layers
