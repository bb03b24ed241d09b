# 📄 File: plantid/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines all the special error types the plant identification service uses
# to say what went wrong (bad photo, limit reached, classifier down) in a clear way.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing specific error types with HTTP status codes,
# error details, and proper serialization for API responses and error handling.
# 🔗 Dependencies:
# typing, FastAPI HTTP status constants
# 🔄 Connected Modules / Calls From:
# All modules for error handling, middleware, API endpoints, domain services

from typing import Any, Dict, Optional
from fastapi import status


class PlantIdException(Exception):
    """
    Base exception class for the plant identification service.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)


# =============================================================================
# VALIDATION & DATA EXCEPTIONS
# =============================================================================

class ValidationError(PlantIdException):
    """
    Exception raised for data validation failures.
    Used when input data doesn't meet validation requirements.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if constraint:
            details["constraint"] = constraint

        super().__init__(
            message=message,
            status_code=status_code,
            details=details,
            error_code="VALIDATION_ERROR"
        )


class InvalidFileTypeError(PlantIdException):
    """
    Exception raised when an uploaded payload is not a supported image.
    """

    def __init__(
        self,
        message: str = "Invalid file type",
        detected_type: Optional[str] = None,
        allowed_types: Optional[list] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if detected_type:
            details["detected_type"] = detected_type
        if allowed_types:
            details["allowed_types"] = allowed_types

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code="INVALID_FILE_TYPE"
        )


class NotFoundError(PlantIdException):
    """
    Exception raised when requested resource is not found.
    Used for missing usage records, subscriptions, etc.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code="NOT_FOUND"
        )


# =============================================================================
# QUOTA & SUBSCRIPTION EXCEPTIONS
# =============================================================================

class SubscriptionError(PlantIdException):
    """
    Exception raised for subscription-related failures.
    Used when identification requires an active subscription.
    """

    def __init__(
        self,
        message: str = "Subscription required",
        user_id: Optional[str] = None,
        subscription_status: Optional[str] = None,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if user_id:
            details["user_id"] = user_id
        if subscription_status:
            details["subscription_status"] = subscription_status
        if reason:
            details["reason"] = reason

        super().__init__(
            message=message,
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            details=details,
            error_code="SUBSCRIPTION_REQUIRED"
        )


class UsageLimitExceededError(PlantIdException):
    """
    Exception raised when a user has used up their identification quota.
    """

    def __init__(
        self,
        message: str = "Usage limit reached",
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
        reason: Optional[str] = None,
        usage: Optional[Dict[str, Any]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if user_id:
            details["user_id"] = user_id
        if limit is not None:
            details["limit"] = limit
        if reason:
            details["reason"] = reason
        if usage:
            details["usage"] = usage

        super().__init__(
            message=message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            details=details,
            error_code="USAGE_LIMIT_EXCEEDED"
        )


class PlantNotIdentifiedError(PlantIdException):
    """
    Exception raised when a classifier answered but found no plant.
    """

    def __init__(
        self,
        message: str = (
            "Could not identify a plant in this image. "
            "Please try with a clearer photo of a plant."
        ),
        provider: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if provider:
            details["provider"] = provider

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code="NO_PLANT_IDENTIFIED"
        )


# =============================================================================
# EXTERNAL SERVICE EXCEPTIONS
# =============================================================================

class ExternalServiceError(PlantIdException):
    """
    Exception raised when an external service is unavailable or not configured.
    """

    def __init__(
        self,
        message: str = "External service unavailable",
        service: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if service:
            details["service"] = service
        if retry_after:
            details["retry_after"] = retry_after

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            error_code="EXTERNAL_SERVICE_UNAVAILABLE"
        )


class ExternalAPIError(PlantIdException):
    """
    Exception raised when an upstream API call fails.
    Used by the shared API client and provider rotation.
    """

    def __init__(
        self,
        message: str = "External API error",
        api_name: Optional[str] = None,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        upstream_status: Optional[int] = None,
        response_body: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "EXTERNAL_API_ERROR"
    ):
        if not details:
            details = {}

        if api_name:
            details["api_name"] = api_name
        if upstream_status:
            details["upstream_status"] = upstream_status
        if response_body:
            details["response_body"] = response_body[:500]

        self.api_name = api_name
        self.upstream_status = upstream_status

        super().__init__(
            message=message,
            status_code=status_code,
            details=details,
            error_code=error_code
        )


class APITimeoutError(ExternalAPIError):
    """Exception raised when an upstream API does not answer in time."""

    def __init__(self, message: str = "External API timed out", api_name: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            api_name=api_name,
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            error_code="EXTERNAL_API_TIMEOUT",
            **kwargs
        )


class APIRateLimitError(ExternalAPIError):
    """Exception raised when an upstream API throttles or refuses for quota."""

    def __init__(
        self,
        message: str = "External API rate limit exceeded",
        api_name: Optional[str] = None,
        retry_after: Optional[int] = None,
        **kwargs
    ):
        super().__init__(
            message=message,
            api_name=api_name,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error_code="EXTERNAL_API_RATE_LIMITED",
            **kwargs
        )
        if retry_after:
            self.details["retry_after"] = retry_after


class APIAuthenticationError(ExternalAPIError):
    """
    Exception raised when an upstream API rejects our credentials.
    This is our configuration problem, not the caller's, so it maps to 502.
    """

    def __init__(self, message: str = "External API authentication failed", api_name: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            api_name=api_name,
            error_code="EXTERNAL_API_AUTH_FAILED",
            **kwargs
        )


class APIRotationError(ExternalAPIError):
    """Exception raised when every provider in a rotation has failed."""

    def __init__(
        self,
        message: str = "All plant identification providers failed",
        attempted: Optional[list] = None,
        errors: Optional[Dict[str, str]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if attempted:
            details["attempted"] = attempted
        if errors:
            details["errors"] = errors

        super().__init__(
            message=message,
            details=details,
            error_code="API_ROTATION_FAILED"
        )


class CircuitBreakerOpenError(PlantIdException):
    """
    Exception raised when a circuit breaker refuses a call.
    Used to fail fast against an upstream that keeps failing.
    """

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        service: Optional[str] = None,
        retry_after: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if service:
            details["service"] = service
        if retry_after is not None:
            details["retry_after"] = round(retry_after, 1)

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            error_code="CIRCUIT_BREAKER_OPEN"
        )


class PaymentProviderError(PlantIdException):
    """Exception raised when the payment provider rejects or fails a call."""

    def __init__(
        self,
        message: str = "Payment provider error",
        provider: str = "stripe",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        details["provider"] = provider
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            error_code="PAYMENT_PROVIDER_ERROR"
        )


# =============================================================================
# DATABASE & INFRASTRUCTURE EXCEPTIONS
# =============================================================================

class DatabaseError(PlantIdException):
    """
    Exception raised for database operation failures.
    Used for connection issues, query failures, etc.
    """

    def __init__(
        self,
        message: str = "Database error",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            error_code="DATABASE_ERROR"
        )


# =============================================================================
# EXCEPTION UTILITIES
# =============================================================================

def is_failover_error(exception: Exception) -> bool:
    """
    Check whether a provider failure should move the rotation to the next provider.

    Args:
        exception: Exception raised by a provider call

    Returns:
        bool: True for upstream failures, False for caller errors
    """
    return isinstance(exception, (ExternalAPIError, CircuitBreakerOpenError, ExternalServiceError))
