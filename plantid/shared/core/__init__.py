"""
Core utilities package for the plant identification backend.
Provides the exception hierarchy, shared dependencies and the rate limiter.
"""

from .exceptions import (
    PlantIdException,
    ValidationError,
    InvalidFileTypeError,
    NotFoundError,
    SubscriptionError,
    UsageLimitExceededError,
    PlantNotIdentifiedError,
    ExternalServiceError,
    ExternalAPIError,
    APITimeoutError,
    APIRateLimitError,
    APIAuthenticationError,
    APIRotationError,
    CircuitBreakerOpenError,
    PaymentProviderError,
    DatabaseError,
)

__all__ = [
    "PlantIdException",
    "ValidationError",
    "InvalidFileTypeError",
    "NotFoundError",
    "SubscriptionError",
    "UsageLimitExceededError",
    "PlantNotIdentifiedError",
    "ExternalServiceError",
    "ExternalAPIError",
    "APITimeoutError",
    "APIRateLimitError",
    "APIAuthenticationError",
    "APIRotationError",
    "CircuitBreakerOpenError",
    "PaymentProviderError",
    "DatabaseError",
]
