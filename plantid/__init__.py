# 📄 File: plantid/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this folder holds the plant identification backend and records its version.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version and package metadata for the
# plant identification FastAPI application.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - plantid.main (service info endpoint)

"""
Plant Identification Backend

Forwards plant photos to third-party classifiers, keeps an identification
history per user, enforces usage quotas and unlocks premium use through
Stripe subscriptions.
"""

__version__ = "1.0.0"
__title__ = "Plant Identification API"
__description__ = "Photo-based plant identification with usage quotas"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
    "__license__",
]
