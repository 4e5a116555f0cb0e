"""Dispatch – process-local dead-letter sink."""
from __future__ import annotations

import logging
from typing import Awaitable, Callable

from stardispatch.kernel.messaging import DeadLetterEntry, DeadLetterStore
from stardispatch.kernel.time import Clock, SystemClock

logger = logging.getLogger(__name__)


class InMemoryDeadLetterStore(DeadLetterStore):
    """Keeps dead letters in memory and logs each one at error level.

    ``republish`` receives the raw payload on :meth:`replay`; without it
    replay is refused.
    """

    def __init__(
        self,
        republish: Callable[[bytes], Awaitable[None]] | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._entries: dict[str, DeadLetterEntry] = {}
        self._republish = republish
        self._clock = clock or SystemClock()

    async def push(
        self,
        message_id: str,
        payload: bytes,
        reason: str,
        *,
        topic: str = "",
        retry_count: int = 0,
    ) -> DeadLetterEntry:
        entry = DeadLetterEntry(
            message_id=message_id,
            topic=topic,
            payload=payload,
            reason=reason,
            failed_at=self._clock.now(),
            retry_count=retry_count,
        )
        self._entries[entry.id] = entry
        logger.error(
            "dead_letter.stored entry=%s message_id=%s topic=%s reason=%s",
            entry.id,
            message_id,
            topic,
            reason,
        )
        return entry

    async def list(self, limit: int = 100) -> list[DeadLetterEntry]:
        ordered = sorted(self._entries.values(), key=lambda e: e.failed_at)
        return ordered[:limit]

    async def replay(self, entry_id: str) -> None:
        entry = self._entries.get(entry_id)
        if entry is None:
            raise KeyError(entry_id)
        if self._republish is None:
            raise RuntimeError("No republish callback configured for dead-letter replay")
        if entry.replayed:
            raise RuntimeError(f"Dead-letter entry {entry_id} was already replayed")
        await self._republish(entry.payload)
        entry.replayed = True
        logger.info("dead_letter.replayed entry=%s message_id=%s", entry.id, entry.message_id)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["InMemoryDeadLetterStore"]
