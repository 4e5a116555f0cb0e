"""Dispatch – ConsumerLoop: pull → deserialize → process → finalize.

Per-message state machine::

    Delivered ──process ok──▶ Finalized            (ack / archive / commit)
        │
        ├──process failed──▶ released, redelivered later
        │                    (bounded by max_deliveries where counted)
        └──malformed or over max_deliveries──▶ DeadLettered
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum

from stardispatch.kernel.errors import InfrastructureError, SerializationError
from stardispatch.kernel.messaging import (
    DeadLetterStore,
    EventProcessor,
    JsonEventSerializer,
    MessageEnvelope,
    MessageSerializer,
    StarAddedEvent,
    SubstrateKind,
    TransportClient,
)
from stardispatch.resilience.retry import BackoffStrategy, ExponentialBackoff

logger = logging.getLogger(__name__)

DEFAULT_MAX_DELIVERIES = 5


class DeliveryOutcome(str, Enum):
    IDLE = "IDLE"
    FINALIZED = "FINALIZED"
    REDELIVERY_PENDING = "REDELIVERY_PENDING"
    DEAD_LETTERED = "DEAD_LETTERED"


class ConsumerLoop:
    """Long-lived consumer over any :class:`TransportClient`.

    ``stop()`` stops new pulls; a message already being processed is
    finished and finalized before :meth:`run` returns.
    """

    def __init__(
        self,
        transport: TransportClient,
        processor: EventProcessor,
        *,
        serializer: MessageSerializer[StarAddedEvent] | None = None,
        dead_letters: DeadLetterStore | None = None,
        max_deliveries: int = DEFAULT_MAX_DELIVERIES,
        pull_timeout: float = 1.0,
        idle_sleep: float = 1.0,
        error_backoff: BackoffStrategy | None = None,
        redelivery_backoff: BackoffStrategy | None = None,
    ) -> None:
        if max_deliveries < 1:
            raise ValueError("max_deliveries must be >= 1")
        self._transport = transport
        self._processor = processor
        self._serializer = serializer or JsonEventSerializer()
        self._dead_letters = dead_letters
        self._max_deliveries = max_deliveries
        self._pull_timeout = pull_timeout
        self._idle_sleep = idle_sleep
        self._error_backoff = error_backoff or ExponentialBackoff()
        self._redelivery_backoff = redelivery_backoff or ExponentialBackoff()
        self._stopping = asyncio.Event()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def dead_letters(self) -> DeadLetterStore | None:
        return self._dead_letters

    def stop(self) -> None:
        if not self._stopping.is_set():
            logger.info("consumer.stop_requested kind=%s", self._transport.kind.value)
        self._stopping.set()

    async def run(self) -> None:
        """Consume until :meth:`stop` is called."""
        self._running = True
        failures = 0
        redeliveries = 0
        logger.info(
            "consumer.started kind=%s endpoint=%s redelivery=%s",
            self._transport.kind.value,
            self._transport.endpoint,
            self._transport.capabilities.supports_redelivery,
        )
        try:
            while not self._stopping.is_set():
                try:
                    outcome = await self.run_once()
                except InfrastructureError as exc:
                    if not exc.transient:
                        raise
                    failures += 1
                    delay = self._error_backoff.compute(failures)
                    logger.error("consumer.pull_failed attempt=%d delay=%.2fs exc=%r", failures, delay, exc)
                    await self._pause(delay)
                    continue
                failures = 0
                if outcome is DeliveryOutcome.REDELIVERY_PENDING and self._redelivers_immediately():
                    redeliveries += 1
                    delay = self._redelivery_backoff.compute(redeliveries)
                    logger.info("consumer.redelivery_backoff attempt=%d delay=%.2fs", redeliveries, delay)
                    await self._pause(delay)
                elif outcome in (DeliveryOutcome.FINALIZED, DeliveryOutcome.DEAD_LETTERED):
                    redeliveries = 0
                elif outcome is DeliveryOutcome.IDLE and self._sleeps_when_idle():
                    await self._pause(self._idle_sleep)
        finally:
            self._running = False
            logger.info("consumer.stopped kind=%s", self._transport.kind.value)

    async def run_once(self) -> DeliveryOutcome:
        """Pull and handle at most one message."""
        envelope = await self._transport.pull(self._pull_timeout)
        if envelope is None:
            return DeliveryOutcome.IDLE
        return await self.handle(envelope)

    async def handle(self, envelope: MessageEnvelope) -> DeliveryOutcome:
        try:
            event = self._serializer.deserialize(envelope.payload)
        except SerializationError as exc:
            await self._dead_letter(envelope, f"malformed payload: {exc.message}")
            return DeliveryOutcome.DEAD_LETTERED

        if envelope.delivery_count is not None and envelope.delivery_count > self._max_deliveries:
            await self._dead_letter(
                envelope,
                f"delivered {envelope.delivery_count} times, limit is {self._max_deliveries}",
            )
            return DeliveryOutcome.DEAD_LETTERED

        logger.info(
            "consumer.processing message_id=%s game_id=%s delivery=%s",
            envelope.message_id,
            event.id,
            envelope.delivery_count,
        )
        try:
            await self._processor.process(envelope.payload)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "consumer.processing_failed message_id=%s game_id=%s delivery=%s exc=%r",
                envelope.message_id,
                event.id,
                envelope.delivery_count,
                exc,
            )
            if not self._transport.capabilities.supports_redelivery:
                logger.error(
                    "consumer.message_lost message_id=%s kind=%s: substrate cannot redeliver",
                    envelope.message_id,
                    self._transport.kind.value,
                )
            await self._transport.release(envelope)
            return DeliveryOutcome.REDELIVERY_PENDING

        if not await self._transport.ack(envelope):
            logger.warning("consumer.already_finalized message_id=%s", envelope.message_id)
        logger.info("consumer.finalized message_id=%s game_id=%s", envelope.message_id, event.id)
        return DeliveryOutcome.FINALIZED

    async def _dead_letter(self, envelope: MessageEnvelope, reason: str) -> None:
        if self._dead_letters is not None:
            await self._dead_letters.push(
                envelope.message_id,
                envelope.payload,
                reason,
                topic=self._transport.topology.queue,
                retry_count=max((envelope.delivery_count or 1) - 1, 0),
            )
        else:
            logger.error("consumer.dead_lettered message_id=%s reason=%s", envelope.message_id, reason)
        await self._transport.discard(envelope)

    def _redelivers_immediately(self) -> bool:
        # nack+requeue and seek-back hand the message straight back; a lease does not
        return (
            self._transport.capabilities.supports_redelivery
            and self._transport.kind is not SubstrateKind.POLLING_TABLE
        )

    def _sleeps_when_idle(self) -> bool:
        # other substrates already waited inside pull()
        return self._transport.kind is SubstrateKind.POLLING_TABLE

    async def _pause(self, seconds: float) -> None:
        if seconds <= 0:
            await asyncio.sleep(0)
            return
        try:
            await asyncio.wait_for(self._stopping.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass


__all__ = ["DEFAULT_MAX_DELIVERIES", "ConsumerLoop", "DeliveryOutcome"]
