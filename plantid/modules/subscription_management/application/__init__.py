# 📄 File: plantid/modules/subscription_management/application/__init__.py
# 🧭 Purpose (Layman Explanation):
# The use cases of the subscription feature
# 🧪 Purpose (Technical Summary):
# Application layer: CQRS commands, queries and their handlers
# 🔗 Dependencies:
# Domain services, Stripe gateway
# 🔄 Connected Modules / Calls From:
# Presentation layer
