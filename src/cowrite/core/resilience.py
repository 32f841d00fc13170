"""Transport policy for LLM calls, built on hyx.

Only the LLM transport retries. The artifact core and the store never do:
their failures surface as a failure flag or an error response.

Usage:
    policy = TransportPolicy.from_settings(get_settings())
    send = policy.guard(client_call)
"""

import asyncio
from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

from hyx.circuitbreaker.api import consecutive_breaker
from hyx.retry.api import retry
from hyx.retry.backoffs import expo

from cowrite.config.settings import Settings


__all__ = ["RateLimitError", "TransientError", "TransportPolicy"]


class TransientError(Exception):
    """A provider failure worth retrying (connection drop, overload, timeout)."""


class RateLimitError(TransientError):
    """The provider throttled the request."""


RETRYABLE = (TransientError, ConnectionError)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def with_timeout(func: F, timeout_secs: float) -> F:
    """Bound each call of ``func``; an expired call becomes a ``TransientError``."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await asyncio.wait_for(func(*args, **kwargs), timeout=timeout_secs)
        except asyncio.TimeoutError as e:
            raise TransientError(f"LLM call timed out after {timeout_secs}s") from e

    return wrapper  # type: ignore


@dataclass(frozen=True)
class TransportPolicy:
    """Retry, circuit breaker and timeout settings for one provider."""

    attempts: int = 3
    backoff_min_secs: float = 2.0
    backoff_max_secs: float = 60.0
    breaker_failures: int = 3
    breaker_recovery_secs: float = 60.0
    timeout_secs: float = 120.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "TransportPolicy":
        return cls(
            attempts=settings.llm_retry_attempts,
            backoff_min_secs=settings.llm_backoff_min_secs,
            backoff_max_secs=settings.llm_backoff_max_secs,
            breaker_failures=settings.llm_breaker_failures,
            breaker_recovery_secs=settings.llm_breaker_recovery_secs,
            timeout_secs=settings.llm_timeout_secs,
        )

    def guard(self, func: F) -> F:
        """
        Wrap ``func`` as timeout, then circuit breaker, then retry (outermost).

        Every guarded function gets its own breaker. While the breaker is
        open, calls fail fast with hyx's ``BreakerFailing``, which is not
        retried. Exhausted retries raise hyx's ``MaxAttemptsExceeded``.
        """
        breaker = consecutive_breaker(
            exceptions=RETRYABLE,
            failure_threshold=self.breaker_failures,
            recovery_time_secs=self.breaker_recovery_secs,
            recovery_threshold=1,
        )
        retrying = retry(
            on=RETRYABLE,
            attempts=self.attempts,
            backoff=expo(
                min_delay_secs=self.backoff_min_secs,
                max_delay_secs=self.backoff_max_secs,
            ),
        )
        return retrying(breaker(with_timeout(func, self.timeout_secs)))
