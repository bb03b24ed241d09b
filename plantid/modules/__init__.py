# 📄 File: plantid/modules/__init__.py
# 🧭 Purpose (Layman Explanation):
# The folder holding the app's feature areas: recognizing plants and managing usage and subscriptions.
# 🧪 Purpose (Technical Summary):
# Package marker for the modular monolith's feature modules.
# 🔗 Dependencies:
# None
# 🔄 Connected Modules / Calls From:
# plantid.api.v1.router, plantid.main
