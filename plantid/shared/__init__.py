# 📄 File: plantid/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a package of common tools every feature uses,
# like settings, errors, logging and the database connection.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package initialization for configuration, infrastructure
# and cross-cutting concerns used by both feature modules.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - plantid.modules.* (domain and infrastructure layers)
# - plantid.api and plantid.main

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management
- Exception hierarchy and shared FastAPI dependencies
- Database infrastructure
- External API client, circuit breaker and rotation
- Logging and image validation utilities
"""

__all__ = []
