"""
Fault handling for calls to the external weather provider.

A provider call is wrapped twice: ``with_retry`` absorbs transient
network errors with exponential backoff (tenacity), and a
``CircuitBreaker`` around the retrying call stops hammering a provider
that keeps failing. Once the breaker is open the weather service
answers from the synthetic generator instead.
"""
import functools
import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Optional, TypeVar

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    """The provider circuit is open; the call was not attempted."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CircuitBreaker:
    """
    Failure counter guarding one provider.

    CLOSED lets every call through. ``failure_threshold`` failures trip
    it to OPEN, where calls are refused with CircuitOpenError until
    ``recovery_timeout`` seconds have passed since the last failure.
    The breaker then goes HALF_OPEN: ``half_open_max_calls`` successful
    trial calls close it, a single failure opens it again.

    Successes while CLOSED forgive one earlier failure each, so only a
    run of mostly failing calls trips the breaker.

    The instance is a decorator::

        breaker = CircuitBreaker("openweather", failure_threshold=3)
        fetch = breaker(fetch)
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        half_open_max_calls: int = 3,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.half_open_max_calls = half_open_max_calls

        self._lock = threading.RLock()
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._trial_successes = 0
        self._last_failure_time: Optional[datetime] = None

    def __repr__(self):
        return f"CircuitBreaker({self.name!r}, state={self._state.value})"

    @property
    def state(self) -> CircuitState:
        with self._lock:
            self._maybe_recover()
            return self._state

    @property
    def is_closed(self) -> bool:
        return self.state is CircuitState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is CircuitState.OPEN

    def _maybe_recover(self):
        # Caller holds the lock
        if self._state is not CircuitState.OPEN or self._last_failure_time is None:
            return
        idle = (_utcnow() - self._last_failure_time).total_seconds()
        if idle >= self.recovery_timeout:
            self._enter(CircuitState.HALF_OPEN)

    def _enter(self, state: CircuitState):
        previous = self._state
        self._state = state
        if state is CircuitState.HALF_OPEN:
            self._trial_successes = 0
            logger.info("Weather provider circuit '%s' half-open, probing", self.name)
        elif state is CircuitState.OPEN:
            logger.warning(
                "Weather provider circuit '%s' opened (%s -> open, %d failures)",
                self.name, previous.value, self._failure_count,
            )
        else:
            self._failure_count = 0
            self._success_count = 0
            logger.info("Weather provider circuit '%s' closed", self.name)

    def record_success(self):
        with self._lock:
            self._success_count += 1
            if self._state is CircuitState.HALF_OPEN:
                self._trial_successes += 1
                if self._trial_successes >= self.half_open_max_calls:
                    self._enter(CircuitState.CLOSED)
            elif self._state is CircuitState.CLOSED and self._failure_count:
                self._failure_count -= 1

    def record_failure(self, error: Exception):
        with self._lock:
            self._failure_count += 1
            self._last_failure_time = _utcnow()
            logger.warning("Weather provider call failed on '%s': %s", self.name, error)

            tripped = (
                self._state is CircuitState.HALF_OPEN
                or (self._state is CircuitState.CLOSED
                    and self._failure_count >= self.failure_threshold)
            )
            if tripped:
                self._enter(CircuitState.OPEN)

    def __call__(self, func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def guarded(*args, **kwargs) -> T:
            if self.is_open:
                raise CircuitOpenError(
                    f"Weather provider circuit '{self.name}' is open; "
                    f"retry after {self.recovery_timeout:g}s"
                )
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                self.record_failure(e)
                raise
            self.record_success()
            return result

        return guarded

    def reset(self):
        """Close the circuit and clear the counters."""
        with self._lock:
            self._enter(CircuitState.CLOSED)

    def get_status(self) -> dict:
        with self._lock:
            last_failure = self._last_failure_time
            return {
                "name": self.name,
                "state": self._state.value,
                "failure_count": self._failure_count,
                "success_count": self._success_count,
                "last_failure": last_failure.isoformat() if last_failure else None,
                "failure_threshold": self.failure_threshold,
                "recovery_timeout_seconds": self.recovery_timeout,
            }


def with_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 30.0,
    exceptions: tuple = (Exception,),
):
    """
    Retry a call on the given exception types.

    Waits grow exponentially from ``min_wait`` up to ``max_wait``
    seconds. ``max_attempts`` counts the first call; when every attempt
    fails the last exception propagates unchanged.
    """
    policy = retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        return policy(func)

    return decorator


# Breakers reported by the health endpoint, keyed by name
_breakers: Dict[str, CircuitBreaker] = {}


def register_circuit_breaker(breaker: CircuitBreaker) -> CircuitBreaker:
    """Expose a breaker on the health endpoint. Later registrations replace earlier ones."""
    _breakers[breaker.name] = breaker
    return breaker


def get_all_circuit_breaker_status() -> Dict[str, dict]:
    return {name: breaker.get_status() for name, breaker in _breakers.items()}
