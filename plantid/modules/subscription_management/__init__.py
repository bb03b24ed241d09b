# 📄 File: plantid/modules/subscription_management/__init__.py
# 🧭 Purpose (Layman Explanation):
# Everything about how many identifications a user may make, and the premium subscription that lifts the limit
# 🧪 Purpose (Technical Summary):
# Feature module: usage quota domain, Stripe subscription lifecycle, usage/subscription/webhook endpoints
# 🔗 Dependencies:
# FastAPI, SQLAlchemy, stripe
# 🔄 Connected Modules / Calls From:
# plantid.api.v1.router, plant_identification (quota enforcement)

"""
Subscription Management Module

Layers:
- domain: UserUsage, QuotaService, UsageService, repository interface
- application: create/confirm/cancel subscription commands, webhook command, usage query
- infrastructure: SQLAlchemy repository, Stripe gateway
- presentation: /api/usage, /api/create-subscription, /api/subscription-success,
  /api/cancel-subscription, /api/stripe/webhook
"""
