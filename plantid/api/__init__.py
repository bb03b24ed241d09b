# 📄 File: plantid/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# This file marks the api folder as a Python package so other parts of the app can import and use
# the API functionality, like a table of contents for all our API features.
# 🧪 Purpose (Technical Summary):
# Package initialization for the API layer: prefix and version constants shared by main and the v1 router.
# 🔗 Dependencies:
# None (package initialization)
# 🔄 Connected Modules / Calls From:
# plantid.main, plantid.api.v1.router

"""
Plant Identification API Package

Structure:
    api/
    ├── __init__.py          # This file
    ├── middleware/          # API middleware components
    │   ├── logging.py
    │   └── error_handling.py
    └── v1/                  # API version 1
        ├── __init__.py
        ├── router.py        # Aggregates the module routers under /api
        └── health.py        # Health check endpoints
"""

# API configuration constants
API_PREFIX = "/api"
CURRENT_VERSION = "v1"

# API response headers
DEFAULT_HEADERS = {
    "X-API-Version": CURRENT_VERSION,
}

__all__ = [
    "API_PREFIX",
    "CURRENT_VERSION",
    "DEFAULT_HEADERS",
]
