"""Resilience – timeout policies."""
from stardispatch.resilience.timeouts.policy import TimeoutPolicy

__all__ = ["TimeoutPolicy"]
