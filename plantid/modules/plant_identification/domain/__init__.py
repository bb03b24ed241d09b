# 📄 File: plantid/modules/plant_identification/domain/__init__.py
# 🧭 Purpose (Layman Explanation):
# The heart of plant identification: what a result looks like and what a classifier must do
# 🧪 Purpose (Technical Summary):
# Domain layer (models, repository interface, classifier port)
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# Application and infrastructure layers
