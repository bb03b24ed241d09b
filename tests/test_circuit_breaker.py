"""Circuit breaker state machine and provider rotation."""

import pytest

from plantid.shared.core.exceptions import (
    APIRotationError,
    CircuitBreakerOpenError,
    ExternalAPIError,
    ValidationError,
)
from plantid.shared.infrastructure.external_apis.api_rotation import APIRotationManager
from plantid.shared.infrastructure.external_apis.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


async def fail():
    raise ExternalAPIError("upstream down", api_name="test")


async def succeed():
    return "ok"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    config = CircuitBreakerConfig(failure_threshold=2, recovery_timeout=30.0, success_threshold=2)
    return CircuitBreaker("test", config, clock=clock)


async def trip(breaker):
    for _ in range(breaker.config.failure_threshold):
        with pytest.raises(ExternalAPIError):
            await breaker.call(fail)


class TestCircuitBreaker:
    async def test_opens_after_consecutive_failures(self, breaker):
        await trip(breaker)

        assert breaker.get_state() == CircuitState.OPEN
        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            await breaker.call(succeed)
        assert exc_info.value.details["retry_after"] == 30.0

    async def test_success_resets_failure_count(self, breaker):
        with pytest.raises(ExternalAPIError):
            await breaker.call(fail)
        await breaker.call(succeed)
        with pytest.raises(ExternalAPIError):
            await breaker.call(fail)

        assert breaker.get_state() == CircuitState.CLOSED

    async def test_unexpected_errors_do_not_trip(self, breaker):
        async def bug():
            raise KeyError("oops")

        for _ in range(5):
            with pytest.raises(KeyError):
                await breaker.call(bug)

        assert breaker.get_state() == CircuitState.CLOSED

    async def test_half_open_recovery(self, breaker, clock):
        await trip(breaker)
        clock.now += 31

        assert await breaker.call(succeed) == "ok"
        assert breaker.get_state() == CircuitState.HALF_OPEN
        await breaker.call(succeed)

        assert breaker.get_state() == CircuitState.CLOSED

    async def test_failure_while_half_open_reopens(self, breaker, clock):
        await trip(breaker)
        clock.now += 31

        with pytest.raises(ExternalAPIError):
            await breaker.call(fail)

        assert breaker.get_state() == CircuitState.OPEN

    async def test_unexpected_error_while_half_open_reopens(self, breaker, clock):
        async def bug():
            raise KeyError("oops")

        await trip(breaker)
        clock.now += 31

        with pytest.raises(KeyError):
            await breaker.call(bug)

        assert breaker.get_state() == CircuitState.OPEN
        clock.now += 31
        assert await breaker.call(succeed) == "ok"
        assert breaker.get_state() == CircuitState.HALF_OPEN

    async def test_status_reports_metrics(self, breaker):
        await breaker.call(succeed)

        status = breaker.get_status()

        assert status["state"] == "closed"
        assert status["metrics"]["recorded_calls"] == 1


class Target:
    def __init__(self, name, error=None):
        self.name = name
        self.error = error
        self.calls = 0

    async def run(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.name


async def run(target):
    return await target.run()


class TestAPIRotationManager:
    async def test_uses_priority_order(self):
        rotation = APIRotationManager("test")
        rotation.add_endpoint("second", Target("second"), priority=2)
        rotation.add_endpoint("first", Target("first"), priority=1)

        result = await rotation.call_with_rotation(run)

        assert result.endpoint_name == "first"
        assert result.value == "first"
        assert rotation.endpoint_names == ["first", "second"]

    async def test_fails_over_on_upstream_error(self):
        rotation = APIRotationManager("test")
        rotation.add_endpoint("broken", Target("broken", ExternalAPIError("500")), priority=1)
        rotation.add_endpoint("backup", Target("backup"), priority=2)

        result = await rotation.call_with_rotation(run)

        assert result.endpoint_name == "backup"
        assert result.attempted == ["broken", "backup"]
        assert rotation.stats["failover_count"] == 1

    async def test_all_failed(self):
        rotation = APIRotationManager("test")
        rotation.add_endpoint("a", Target("a", ExternalAPIError("500")))
        rotation.add_endpoint("b", Target("b", ExternalAPIError("503")))

        with pytest.raises(APIRotationError) as exc_info:
            await rotation.call_with_rotation(run)

        assert exc_info.value.status_code == 502
        assert exc_info.value.details["attempted"] == ["a", "b"]

    async def test_caller_errors_are_not_retried(self):
        rotation = APIRotationManager("test")
        first = Target("a", ValueError("bad input"))
        second = Target("b")
        rotation.add_endpoint("a", first, priority=1)
        rotation.add_endpoint("b", second, priority=2)

        with pytest.raises(ValueError):
            await rotation.call_with_rotation(run)
        assert second.calls == 0

    async def test_preferred_endpoint_only(self):
        rotation = APIRotationManager("test")
        first = Target("a", ExternalAPIError("500"))
        rotation.add_endpoint("a", first, priority=1)
        rotation.add_endpoint("b", Target("b"), priority=2)

        result = await rotation.call_with_rotation(run, preferred="b")

        assert result.endpoint_name == "b"
        assert first.calls == 0

    async def test_unknown_preferred_endpoint(self):
        rotation = APIRotationManager("test")
        rotation.add_endpoint("a", Target("a"))

        with pytest.raises(ValidationError) as exc_info:
            await rotation.call_with_rotation(run, preferred="nope")

        assert exc_info.value.status_code == 400

    async def test_open_circuit_is_skipped(self):
        rotation = APIRotationManager("test")
        flaky = Target("a", ExternalAPIError("500"))
        rotation.add_endpoint("a", flaky, priority=1, circuit_breaker_config=CircuitBreakerConfig(failure_threshold=1))
        rotation.add_endpoint("b", Target("b"), priority=2)

        await rotation.call_with_rotation(run)
        result = await rotation.call_with_rotation(run)

        assert result.endpoint_name == "b"
        assert flaky.calls == 1
        assert rotation.get_rotation_stats()["endpoints"][0]["circuit_state"] == "open"
