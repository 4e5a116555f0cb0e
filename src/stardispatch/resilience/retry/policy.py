"""Resilience – RetryPolicy backed by ``tenacity``.

Parameters
----------
max_attempts:
    Maximum number of call attempts (including the first call).
backoff:
    A :class:`~stardispatch.resilience.retry.backoff.BackoffStrategy`
    translated into a ``tenacity`` wait.  Defaults to a fixed 250 ms.
retryable_exceptions:
    Only these exception types are retried; anything else propagates at
    once.

Example
-------
::

    policy = RetryPolicy(max_attempts=120, backoff=ConstantBackoff(0.25))
    connection = await policy.execute_async(transport.connect)
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TypeVar

import tenacity

from stardispatch.resilience.retry.backoff import BackoffStrategy, ConstantBackoff

T = TypeVar("T")
logger = logging.getLogger(__name__)


class RetryPolicy:
    """Bounded retry with a pluggable backoff, logging every failed attempt."""

    def __init__(
        self,
        max_attempts: int = 3,
        backoff: BackoffStrategy | None = None,
        retryable_exceptions: tuple[type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        self.max_attempts = max_attempts
        self.backoff = backoff or ConstantBackoff()
        self.retryable_exceptions = retryable_exceptions
        self._sleep = sleep

    def _wait(self, retry_state: tenacity.RetryCallState) -> float:
        return self.backoff.compute(retry_state.attempt_number)

    def _log_attempt(self, retry_state: tenacity.RetryCallState) -> None:
        outcome = retry_state.outcome
        if outcome is not None and outcome.failed:
            logger.warning(
                "retry.attempt_failed attempt=%d/%d exc=%r",
                retry_state.attempt_number,
                self.max_attempts,
                outcome.exception(),
            )

    def _build_async_retrying(self) -> tenacity.AsyncRetrying:
        kwargs: dict[str, Any] = {}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=tenacity.retry_if_exception_type(self.retryable_exceptions),
            after=self._log_attempt,
            reraise=True,
            **kwargs,
        )

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Execute *func* with retry; re-raise the last error once exhausted."""
        async for attempt in self._build_async_retrying():
            with attempt:
                result = await func()
        return result  # type: ignore[return-value]


__all__ = ["RetryPolicy"]
