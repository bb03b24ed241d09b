# 📄 File: plantid/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains the settings that tell the app which classification services,
# quota limits and payment keys to use.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization with exports for settings management.
#
# 🔗 Dependencies:
# - settings.py (application settings)
#
# 🔄 Connected Modules / Calls From:
# - plantid.main (application startup)
# - All modules requiring configuration

"""
Configuration Management Package

Handles all application configuration including:
- Environment-based settings
- Database URL
- External API credentials and settings
- Usage quota limits
"""

from .settings import get_settings, Settings

__all__ = [
    "get_settings",
    "Settings",
]
