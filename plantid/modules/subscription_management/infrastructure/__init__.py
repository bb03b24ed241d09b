# 📄 File: plantid/modules/subscription_management/infrastructure/__init__.py
# 🧭 Purpose (Layman Explanation):
# Storage and payment-provider plumbing for usage and subscriptions
# 🧪 Purpose (Technical Summary):
# Infrastructure layer: SQLAlchemy persistence and the Stripe adapter
# 🔗 Dependencies:
# database, external
# 🔄 Connected Modules / Calls From:
# Presentation dependencies, application handlers
