"""Resilience – TimeoutPolicy."""
from __future__ import annotations

import asyncio
import dataclasses
from typing import Awaitable, Callable, TypeVar

from stardispatch.kernel.errors import TimeoutError as InfrastructureTimeoutError

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class TimeoutPolicy:
    """Bound one awaited call, e.g. a publish on the request path.

    The wrapped call is cancelled when the deadline passes and an
    infrastructure ``TimeoutError`` naming *operation* is raised instead.
    """

    timeout_seconds: float
    operation: str = "operation"

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

    async def execute(self, func: Callable[[], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(func(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise InfrastructureTimeoutError(
                f"{self.operation} timed out after {self.timeout_seconds}s",
                detail={"operation": self.operation, "timeout_seconds": self.timeout_seconds},
                cause=exc,
            ) from exc


__all__ = ["TimeoutPolicy"]
