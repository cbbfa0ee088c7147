"""
This module implements a circuit breaker pattern for provider calls.
"""

import inspect
import time
from enum import Enum
from functools import wraps
from typing import Callable, Dict, Optional

from forecast_service.exceptions import CircuitBreakerOpenException
from forecast_service.utils.logger import setup_logger

logger = setup_logger(__name__)

_circuit_breakers: Dict[str, "CircuitBreaker"] = {}


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    A simple circuit breaker protecting calls to a weather provider.

    States:
    - CLOSED: Normal operation, requests pass through
    - OPEN: Too many failures, requests are blocked
    - HALF_OPEN: Testing if the provider has recovered

    Only exceptions of ``expected_exception`` count as failures, so a
    provider answering "city not found" does not trip the breaker.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: int = 60,
        expected_exception: Optional[type[Exception]] = None,
        name: str = "CircuitBreaker",
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception or Exception
        self.name = name

        self._failure_count = 0
        self._last_failure_time = None
        self._state = CircuitState.CLOSED

        _circuit_breakers[name] = self

    @property
    def state(self) -> str:
        """Get current circuit breaker state as string."""
        return self._get_state().value

    def _should_attempt_reset(self) -> bool:
        return (
            self._last_failure_time is not None
            and time.time() - self._last_failure_time >= self.recovery_timeout
        )

    def _record_success(self):
        self._failure_count = 0
        self._state = CircuitState.CLOSED
        logger.debug("Circuit breaker '%s' recorded success, state: CLOSED", self.name)

    def _record_failure(self):
        self._failure_count += 1
        self._last_failure_time = time.time()

        if self._failure_count >= self.failure_threshold:
            self._state = CircuitState.OPEN
            logger.warning(
                "Circuit breaker '%s' opened after %s failures",
                self.name,
                self._failure_count,
            )

    def _get_state(self) -> CircuitState:
        """Get current state, checking if we should transition to half-open."""
        if self._state == CircuitState.OPEN and self._should_attempt_reset():
            self._state = CircuitState.HALF_OPEN
            logger.debug("Circuit breaker '%s' half-open, attempting reset", self.name)
        return self._state

    def __call__(self, func: Callable) -> Callable:
        """Wrap an async callable with circuit breaker protection."""
        if not inspect.iscoroutinefunction(func):
            raise ValueError("Circuit breaker only supports async functions")

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            if self._get_state() == CircuitState.OPEN:
                error_msg = f"Circuit breaker '{self.name}' is OPEN"
                logger.error(error_msg)
                raise CircuitBreakerOpenException(error_msg)

            try:
                result = await func(*args, **kwargs)
            except self.expected_exception:
                self._record_failure()
                raise

            self._record_success()
            return result

        return async_wrapper


def get_circuit_breaker(name: str) -> Optional[CircuitBreaker]:
    """Get a circuit breaker by name from the global registry."""
    return _circuit_breakers.get(name)


def circuit_breaker_states() -> Dict[str, str]:
    """Current state of every registered breaker, keyed by name."""
    return {name: breaker.state for name, breaker in _circuit_breakers.items()}
