# 📄 File: plantid/shared/infrastructure/external_apis/api_rotation.py

# 🧭 Purpose (Layman Explanation):
# This file manages multiple backup services - if one plant identification service is down,
# it automatically tries the next one, so a single outage does not stop identifications.

# 🧪 Purpose (Technical Summary):
# Implements priority-ordered API rotation with one circuit breaker per endpoint, failover on
# upstream errors, optional pinning to a single endpoint, and per-endpoint performance tracking.

# 🔗 Dependencies:
# - circuit_breaker: Circuit breaker implementation
# - plantid.shared.core.exceptions: failover classification and rotation errors

# 🔄 Connected Modules / Calls From:
# Used by: plant_identification provider registry (classifier failover)

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, TypeVar

from plantid.shared.core.exceptions import APIRotationError, ValidationError, is_failover_error
from plantid.shared.infrastructure.external_apis.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
)
from plantid.shared.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class APIEndpoint:
    """API endpoint configuration."""
    name: str
    target: Any
    priority: int = 1
    enabled: bool = True
    circuit_breaker: Optional[CircuitBreaker] = None
    last_used: Optional[datetime] = None
    success_rate: float = 1.0
    avg_response_time: float = 0.0


@dataclass
class RotationResult(Generic[T]):
    """Value returned by the endpoint that answered, plus the attempt trail."""
    endpoint_name: str
    value: T
    attempted: List[str] = field(default_factory=list)


class APIRotationManager:
    """
    Manages rotation and failover between multiple API endpoints.

    Endpoints are tried in ascending priority order. Upstream failures
    (ExternalAPIError and subclasses, open circuits, unavailable services)
    move on to the next endpoint; any other exception propagates unchanged.
    """

    def __init__(self, category: str):
        self.category = category
        self.endpoints: List[APIEndpoint] = []

        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'failover_count': 0,
            'endpoints_used': {}
        }

    def add_endpoint(
        self,
        name: str,
        target: Any,
        priority: int = 1,
        circuit_breaker_config: Optional[CircuitBreakerConfig] = None
    ) -> APIEndpoint:
        """Add an API endpoint to the rotation."""
        endpoint = APIEndpoint(
            name=name,
            target=target,
            priority=priority,
            circuit_breaker=CircuitBreaker(name, circuit_breaker_config or CircuitBreakerConfig())
        )

        self.endpoints.append(endpoint)
        # sorted() is stable, so equal priorities keep registration order
        self.endpoints.sort(key=lambda x: x.priority)

        logger.info(f"Added endpoint {name} to {self.category} rotation (priority: {priority})")
        return endpoint

    def get_endpoint(self, name: str) -> Optional[APIEndpoint]:
        for endpoint in self.endpoints:
            if endpoint.name == name:
                return endpoint
        return None

    @property
    def endpoint_names(self) -> List[str]:
        return [endpoint.name for endpoint in self.endpoints if endpoint.enabled]

    def _get_endpoint_order(self, preferred: Optional[str]) -> List[APIEndpoint]:
        if preferred is None:
            return [endpoint for endpoint in self.endpoints if endpoint.enabled]

        endpoint = self.get_endpoint(preferred)
        if endpoint is None or not endpoint.enabled:
            raise ValidationError(
                f"Unknown or unconfigured provider: {preferred}",
                field="provider",
                value=preferred,
                constraint=f"one of {self.endpoint_names}",
                status_code=400
            )
        return [endpoint]

    async def call_with_rotation(
        self,
        operation: Callable[[Any], Awaitable[T]],
        preferred: Optional[str] = None
    ) -> RotationResult[T]:
        """
        Run ``operation(target)`` against endpoints until one answers.

        Args:
            operation: Async callable receiving the endpoint's target
            preferred: Restrict the call to this endpoint name

        Returns:
            RotationResult: Name of the answering endpoint and its value

        Raises:
            ValidationError: If ``preferred`` names no enabled endpoint
            APIRotationError: If all endpoints failed
        """
        endpoint_order = self._get_endpoint_order(preferred)
        if not endpoint_order:
            raise APIRotationError(f"No endpoints configured for {self.category}")

        attempted: List[str] = []
        errors: Dict[str, str] = {}

        for api_endpoint in endpoint_order:
            attempted.append(api_endpoint.name)
            self.stats['total_requests'] += 1
            self.stats['endpoints_used'][api_endpoint.name] = (
                self.stats['endpoints_used'].get(api_endpoint.name, 0) + 1
            )

            start_time = time.time()
            try:
                value = await api_endpoint.circuit_breaker.call(operation, api_endpoint.target)
            except Exception as e:
                self._update_endpoint_performance(api_endpoint, time.time() - start_time, False)

                if not is_failover_error(e):
                    raise

                errors[api_endpoint.name] = getattr(e, 'message', str(e))
                self.stats['failover_count'] += 1
                logger.warning(
                    f"API call failed via {api_endpoint.name} "
                    f"(attempt {len(attempted)}/{len(endpoint_order)}): {e}"
                )
                continue

            response_time = time.time() - start_time
            self._update_endpoint_performance(api_endpoint, response_time, True)
            self.stats['successful_requests'] += 1

            logger.info(
                f"✅ API call successful via {api_endpoint.name} "
                f"(attempt {len(attempted)}/{len(endpoint_order)}) - {response_time:.2f}s"
            )
            return RotationResult(endpoint_name=api_endpoint.name, value=value, attempted=attempted)

        self.stats['failed_requests'] += 1
        logger.error(f"❌ All {self.category} endpoints failed: {errors}")
        raise APIRotationError(
            f"All {self.category} providers failed",
            attempted=attempted,
            errors=errors
        )

    def _update_endpoint_performance(self, endpoint: APIEndpoint, response_time: float, success: bool):
        """Update endpoint performance metrics."""
        endpoint.last_used = datetime.now(timezone.utc)

        if endpoint.avg_response_time == 0:
            endpoint.avg_response_time = response_time
        else:
            endpoint.avg_response_time = endpoint.avg_response_time * 0.7 + response_time * 0.3

        success_value = 1.0 if success else 0.0
        endpoint.success_rate = max(endpoint.success_rate * 0.9 + success_value * 0.1, 0.1)

    def get_rotation_stats(self) -> Dict[str, Any]:
        """Get rotation manager statistics."""
        return {
            'category': self.category,
            'total_endpoints': len(self.endpoints),
            'enabled_endpoints': len(self.endpoint_names),
            'stats': self.stats,
            'endpoints': [
                {
                    'name': ep.name,
                    'enabled': ep.enabled,
                    'priority': ep.priority,
                    'success_rate': round(ep.success_rate, 3),
                    'avg_response_time': round(ep.avg_response_time, 3),
                    'circuit_state': ep.circuit_breaker.state.value if ep.circuit_breaker else CircuitState.CLOSED.value
                }
                for ep in self.endpoints
            ]
        }
