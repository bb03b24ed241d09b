# 📄 File: plantid/shared/utils/__init__.py

# 🧭 Purpose (Layman Explanation):
# A collection of helpers other parts of the app use for logging and checking uploaded photos.

# 🧪 Purpose (Technical Summary):
# Utilities package exporting structured logging setup and image payload validation.

# 🔗 Dependencies:
# - logging: Structured logging utilities
# - validators: Image payload validation

# 🔄 Connected Modules / Calls From:
# Used by: plantid.main, middleware, external API clients, identification handlers

from .logging import get_logger, log_context, setup_logging
from .validators import ImagePayload, decode_image_payload, validate_user_id

__all__ = [
    "get_logger",
    "log_context",
    "setup_logging",
    "ImagePayload",
    "decode_image_payload",
    "validate_user_id",
]
