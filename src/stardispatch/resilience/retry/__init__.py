"""Resilience – retry with configurable backoff strategies."""
from stardispatch.resilience.retry.backoff import BackoffStrategy, ConstantBackoff, ExponentialBackoff
from stardispatch.resilience.retry.policy import RetryPolicy

__all__ = ["BackoffStrategy", "ConstantBackoff", "ExponentialBackoff", "RetryPolicy"]
