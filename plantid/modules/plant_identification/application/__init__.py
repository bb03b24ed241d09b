# 📄 File: plantid/modules/plant_identification/application/__init__.py
# 🧭 Purpose (Layman Explanation):
# The use cases of plant identification
# 🧪 Purpose (Technical Summary):
# Application layer: CQRS commands, queries and their handlers
# 🔗 Dependencies:
# Domain layer, classifier registry, usage service
# 🔄 Connected Modules / Calls From:
# Presentation layer
