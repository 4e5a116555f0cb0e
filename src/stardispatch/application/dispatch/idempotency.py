"""Dispatch – DeduplicatingProcessor (inbox pattern over an EventProcessor)."""
from __future__ import annotations

import logging

from stardispatch.kernel.messaging import (
    EventProcessor,
    InboxStore,
    InMemoryInboxStore,
    JsonEventSerializer,
    MessageSerializer,
    StarAddedEvent,
)

logger = logging.getLogger(__name__)


class DeduplicatingProcessor:
    """Skip payloads whose event was already processed successfully.

    The key is recorded only after *inner* succeeds, so a failure still
    leads to a retry on redelivery.
    """

    def __init__(
        self,
        inner: EventProcessor,
        store: InboxStore | None = None,
        serializer: MessageSerializer[StarAddedEvent] | None = None,
    ) -> None:
        self._inner = inner
        self._store = store or InMemoryInboxStore()
        self._serializer = serializer or JsonEventSerializer()

    async def process(self, payload: bytes) -> None:
        key = self._serializer.deserialize(payload).dedup_key
        if await self._store.has_been_processed(key):
            logger.info("dispatch.duplicate_skipped key=%s", key)
            return
        await self._inner.process(payload)
        await self._store.record(key)


__all__ = ["DeduplicatingProcessor"]
