"""Resilience – bounded retry and timeouts."""

from stardispatch.resilience.retry import BackoffStrategy, ConstantBackoff, ExponentialBackoff, RetryPolicy
from stardispatch.resilience.timeouts import TimeoutPolicy

__all__ = [
    "BackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "RetryPolicy",
    "TimeoutPolicy",
]
