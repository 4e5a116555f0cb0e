"""Kernel messaging – inbox port for duplicate suppression."""
from __future__ import annotations

import abc


class InboxStore(abc.ABC):
    """Remembers which events were already processed.

    Lets an at-least-once consumer behave effectively-once.
    """

    @abc.abstractmethod
    async def record(self, key: str) -> None:
        """Persist *key* as processed."""
        ...

    @abc.abstractmethod
    async def has_been_processed(self, key: str) -> bool:
        """Return ``True`` if *key* was already recorded."""
        ...


class InMemoryInboxStore(InboxStore):
    """Process-local inbox; duplicates across processes are not detected."""

    def __init__(self) -> None:
        self._keys: set[str] = set()

    async def record(self, key: str) -> None:
        self._keys.add(key)

    async def has_been_processed(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)


__all__ = ["InMemoryInboxStore", "InboxStore"]
