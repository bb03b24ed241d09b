# 📄 File: plantid/modules/plant_identification/infrastructure/__init__.py
# 🧭 Purpose (Layman Explanation):
# Storage and outside-service plumbing for plant identification
# 🧪 Purpose (Technical Summary):
# Infrastructure layer: SQLAlchemy persistence and classifier adapters
# 🔗 Dependencies:
# database, external
# 🔄 Connected Modules / Calls From:
# Presentation dependencies, application handlers, plantid.main
