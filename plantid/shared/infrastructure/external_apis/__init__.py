# 📄 File: plantid/shared/infrastructure/external_apis/__init__.py

# 🧭 Purpose (Layman Explanation):
# The toolbox for talking to outside services (plant classifiers) reliably.

# 🧪 Purpose (Technical Summary):
# Exports the shared HTTP client, circuit breaker and rotation manager used by provider integrations.

# 🔗 Dependencies:
# - api_client: Generic HTTP client with retry logic
# - api_rotation: API rotation and failover management
# - circuit_breaker: Circuit breaker for API resilience

# 🔄 Connected Modules / Calls From:
# Used by: plant_identification.infrastructure.external

from .api_client import APIClient
from .api_rotation import APIEndpoint, APIRotationManager, RotationResult
from .circuit_breaker import CircuitBreaker, CircuitBreakerConfig, CircuitState

__all__ = [
    "APIClient",
    "APIEndpoint",
    "APIRotationManager",
    "RotationResult",
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
]
