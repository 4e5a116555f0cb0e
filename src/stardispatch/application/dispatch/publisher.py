"""Dispatch – Publisher: serialize a star event and hand it to the transport.

A successful :meth:`Publisher.publish` means the broker accepted
responsibility for the message when ``guarantee.durable`` is true.  For the
push/pull socket it only means the local send completed; nothing was
persisted and a consumer crash loses the message.

Publishing is best-effort notification, not a transactional outbox: the
business write has already committed when ``publish`` runs, and a crash in
between loses the event.
"""
from __future__ import annotations

import logging

from stardispatch.kernel.errors import BaseError, PublishError
from stardispatch.kernel.messaging import (
    DeliveryCapabilities,
    JsonEventSerializer,
    MessageSerializer,
    StarAddedEvent,
    TransportClient,
)
from stardispatch.resilience.timeouts import TimeoutPolicy

logger = logging.getLogger(__name__)

DEFAULT_PUBLISH_TIMEOUT = 5.0


class Publisher:
    def __init__(
        self,
        transport: TransportClient,
        *,
        serializer: MessageSerializer[StarAddedEvent] | None = None,
        timeout: float = DEFAULT_PUBLISH_TIMEOUT,
    ) -> None:
        self._transport = transport
        self._serializer = serializer or JsonEventSerializer()
        self._timeout = TimeoutPolicy(timeout, operation="publish")

    @property
    def guarantee(self) -> DeliveryCapabilities:
        return self._transport.capabilities

    async def publish(self, event: StarAddedEvent) -> None:
        """Publish *event*; raise :class:`PublishError` on any failure."""
        try:
            payload = self._serializer.serialize(event)
            await self._timeout.execute(lambda: self._transport.publish(payload))
        except Exception as exc:
            logger.error(
                "dispatch.publish_failed kind=%s game_id=%s exc=%r",
                self._transport.kind.value,
                event.id,
                exc,
            )
            if isinstance(exc, PublishError):
                raise
            code = exc.code if isinstance(exc, BaseError) else None
            raise PublishError(
                f"Could not publish event for game {event.id}",
                detail={"game_id": event.id, "reason": code or type(exc).__name__},
                cause=exc,
            ) from exc
        if not self.guarantee.durable:
            logger.debug("dispatch.published_unconfirmed kind=%s game_id=%s", self._transport.kind.value, event.id)
        logger.info("dispatch.published kind=%s game_id=%s stars=%s", self._transport.kind.value, event.id, event.star_count)

    async def notify(self, event: StarAddedEvent) -> bool:
        """Write-path helper: publish, log failures, never raise.

        Returns ``True`` when the event was handed off.
        """
        try:
            await self.publish(event)
        except PublishError:
            return False
        return True


__all__ = ["DEFAULT_PUBLISH_TIMEOUT", "Publisher"]
