# 📄 File: plantid/shared/infrastructure/external_apis/circuit_breaker.py
# 🧭 Purpose (Layman Explanation):
# This file acts like an electrical circuit breaker for classifier calls - when an external service fails
# too many times in a row, it "trips" and stops calling it for a while so we fail fast and try another one.
# 🧪 Purpose (Technical Summary):
# Implements the Circuit Breaker pattern (CLOSED -> OPEN -> HALF_OPEN -> CLOSED) with consecutive-failure
# tripping, timed recovery trials, a success threshold for closing, and call/state-change metrics.
# 🔗 Dependencies:
# time, enum, dataclasses, threading, collections.deque, logging
# 🔄 Connected Modules / Calls From:
# api_rotation.py (one breaker per provider), health endpoint (status reporting)

import logging
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from threading import Lock
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from plantid.shared.core.exceptions import (
    APIRateLimitError,
    APITimeoutError,
    CircuitBreakerOpenError,
    ExternalAPIError,
)

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    """Circuit breaker states"""
    CLOSED = "closed"        # Normal operation, requests flow through
    OPEN = "open"            # Circuit tripped, requests fail fast
    HALF_OPEN = "half_open"  # Testing if service recovered


@dataclass
class CircuitBreakerConfig:
    """Configuration for circuit breaker behavior"""
    failure_threshold: int = 5
    recovery_timeout: float = 60.0
    success_threshold: int = 3

    # Exceptions that count as upstream failures
    expected_exceptions: Tuple[Type[BaseException], ...] = (
        ExternalAPIError,
        APITimeoutError,
        APIRateLimitError,
    )


class CircuitBreakerMetrics:
    """Metrics collector for circuit breaker performance"""

    def __init__(self, max_records: int = 500):
        self.call_records = deque(maxlen=max_records)
        self.state_changes = deque(maxlen=100)
        self._lock = Lock()

    def record_call(self, success: bool, response_time: float, error_type: Optional[str] = None):
        with self._lock:
            self.call_records.append({
                'timestamp': time.time(),
                'success': success,
                'response_time': response_time,
                'error_type': error_type
            })

    def record_state_change(self, old_state: CircuitState, new_state: CircuitState, reason: str):
        with self._lock:
            self.state_changes.append({
                'timestamp': time.time(),
                'from': old_state.value,
                'to': new_state.value,
                'reason': reason
            })

    def summary(self) -> Dict[str, Any]:
        with self._lock:
            total = len(self.call_records)
            failures = sum(1 for record in self.call_records if not record['success'])
            avg = (
                sum(record['response_time'] for record in self.call_records) / total
                if total else 0.0
            )
            return {
                'recorded_calls': total,
                'recorded_failures': failures,
                'failure_rate': failures / total if total else 0.0,
                'average_response_time': avg,
                'state_changes': list(self.state_changes)[-10:]
            }


class CircuitBreaker:
    """
    Circuit breaker for external API resilience.

    Trips to OPEN after ``failure_threshold`` consecutive failures, moves to
    HALF_OPEN once ``recovery_timeout`` seconds have passed, and closes again
    after ``success_threshold`` successful trial calls. Any failure while
    HALF_OPEN re-opens the circuit.
    """

    def __init__(
        self,
        name: str,
        config: Optional[CircuitBreakerConfig] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.name = name
        self.config = config or CircuitBreakerConfig()
        self._clock = clock
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.success_count = 0
        self.half_open_calls = 0
        self.opened_at: Optional[float] = None
        self.last_failure_at: Optional[datetime] = None
        self.metrics = CircuitBreakerMetrics()
        self._lock = Lock()

        logger.debug(f"Circuit breaker '{name}' initialized in CLOSED state")

    def _transition_to_state(self, new_state: CircuitState, reason: str):
        """Transition circuit breaker to new state (caller holds the lock)."""
        old_state = self.state
        if old_state == new_state:
            return

        self.state = new_state

        if new_state == CircuitState.OPEN:
            self.opened_at = self._clock()
        elif new_state == CircuitState.HALF_OPEN:
            self.success_count = 0
            self.half_open_calls = 0
        elif new_state == CircuitState.CLOSED:
            self.failure_count = 0
            self.success_count = 0
            self.opened_at = None

        self.metrics.record_state_change(old_state, new_state, reason)

        level = logging.WARNING if new_state == CircuitState.OPEN else logging.INFO
        logger.log(level, f"Circuit breaker '{self.name}' {old_state.value} -> {new_state.value}: {reason}")

    def _retry_after(self) -> float:
        if self.opened_at is None:
            return 0.0
        return max(0.0, self.config.recovery_timeout - (self._clock() - self.opened_at))

    def _before_call(self) -> None:
        """Refuse the call when open; promote to HALF_OPEN once the timeout passed."""
        with self._lock:
            if self.state == CircuitState.OPEN:
                if self._retry_after() > 0:
                    raise CircuitBreakerOpenError(
                        f"Circuit breaker '{self.name}' is open",
                        service=self.name,
                        retry_after=self._retry_after()
                    )
                self._transition_to_state(CircuitState.HALF_OPEN, "Recovery timeout elapsed")

            if self.state == CircuitState.HALF_OPEN:
                if self.half_open_calls >= self.config.success_threshold:
                    raise CircuitBreakerOpenError(
                        f"Circuit breaker '{self.name}' is half-open and probing",
                        service=self.name
                    )
                self.half_open_calls += 1

    def _record_success(self, response_time: float):
        self.metrics.record_call(True, response_time)

        with self._lock:
            if self.state == CircuitState.HALF_OPEN:
                self.success_count += 1
                if self.success_count >= self.config.success_threshold:
                    self._transition_to_state(CircuitState.CLOSED, "Successful recovery verified")
            else:
                self.failure_count = 0

    def _record_failure(self, exception: Exception, response_time: float):
        self.metrics.record_call(False, response_time, type(exception).__name__)

        with self._lock:
            self.failure_count += 1
            self.last_failure_at = datetime.now(timezone.utc)

            if self.state == CircuitState.HALF_OPEN:
                self._transition_to_state(CircuitState.OPEN, f"Failure during recovery test: {type(exception).__name__}")
            elif self.failure_count >= self.config.failure_threshold:
                self._transition_to_state(CircuitState.OPEN, f"{self.failure_count} consecutive failures")

    async def call(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """
        Execute a function call through the circuit breaker.

        Args:
            func: Async function to call
            *args: Function arguments
            **kwargs: Function keyword arguments

        Returns:
            Function result

        Raises:
            CircuitBreakerOpenError: When circuit is open
            Original exception: When call fails
        """
        self._before_call()

        start_time = time.time()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            response_time = time.time() - start_time
            # Any failure while half-open re-opens the circuit and frees the trial slot
            if isinstance(e, self.config.expected_exceptions) or self.state == CircuitState.HALF_OPEN:
                self._record_failure(e, response_time)
            else:
                self.metrics.record_call(False, response_time, type(e).__name__)
            raise

        self._record_success(time.time() - start_time)
        return result

    def get_state(self) -> CircuitState:
        """Get current circuit breaker state"""
        return self.state

    def get_status(self) -> Dict[str, Any]:
        """Get circuit breaker status and metrics"""
        with self._lock:
            status = {
                'name': self.name,
                'state': self.state.value,
                'failure_count': self.failure_count,
                'success_count': self.success_count,
                'last_failure_at': self.last_failure_at.isoformat() if self.last_failure_at else None,
                'retry_after': round(self._retry_after(), 1) if self.state == CircuitState.OPEN else None,
                'config': {
                    'failure_threshold': self.config.failure_threshold,
                    'recovery_timeout': self.config.recovery_timeout,
                    'success_threshold': self.config.success_threshold
                }
            }
        status['metrics'] = self.metrics.summary()
        return status
