"""Kernel messaging – TransportClient port and Topology descriptor."""
from __future__ import annotations

import abc
import asyncio
import dataclasses
import logging
from typing import Any, ClassVar

from stardispatch.kernel.messaging.capabilities import (
    DeliveryCapabilities,
    SubstrateKind,
    capabilities_for,
)
from stardispatch.kernel.messaging.message import MessageEnvelope

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Topology:
    """Durable names a substrate needs before the first publish.

    Not every substrate uses every field: RabbitMQ binds ``queue`` to the
    fanout ``exchange``, Kafka uses ``topic``/``group_id``, PGMQ uses
    ``queue``.  Creation is always create-if-absent.
    """

    exchange: str = "game_events"
    queue: str = "email_queue"
    topic: str = "game-events"
    group_id: str = "email-service-group"
    dead_letter_queue: str | None = None


class TransportClient(abc.ABC):
    """Port: uniform operations over one concrete substrate.

    One instance is built per process, connected by the bootstrapper and
    then shared by reference between the publisher and the consumer loop.
    Structural operations (topology provisioning) are serialised by an
    internal lock and run at most once per client.
    """

    kind: ClassVar[SubstrateKind]

    def __init__(self, topology: Topology | None = None) -> None:
        self._topology = topology or Topology()
        self._structure_lock = asyncio.Lock()
        self._provisioned = False

    @property
    def topology(self) -> Topology:
        return self._topology

    @property
    def capabilities(self) -> DeliveryCapabilities:
        return capabilities_for(self.kind)

    @property
    @abc.abstractmethod
    def endpoint(self) -> str:
        """Address used for logging and error reporting."""

    @abc.abstractmethod
    async def connect(self) -> None:
        """Open the connection; raise ``ConnectionError`` when unreachable."""

    @abc.abstractmethod
    async def close(self) -> None: ...

    async def provision_topology(self) -> None:
        """Create the durable topology once, even under concurrent callers."""
        async with self._structure_lock:
            if self._provisioned:
                return
            await self._declare_topology()
            self._provisioned = True
            logger.info("transport.topology_ready kind=%s topology=%s", self.kind.value, self._topology)

    @abc.abstractmethod
    async def _declare_topology(self) -> None:
        """Idempotently create queue/exchange/topic/table."""

    @abc.abstractmethod
    async def publish(self, payload: bytes) -> None:
        """Hand *payload* to the substrate, persistent where supported."""

    @abc.abstractmethod
    async def pull(self, timeout: float) -> MessageEnvelope | None:
        """Wait up to *timeout* seconds for one message; ``None`` when empty."""

    @abc.abstractmethod
    async def ack(self, envelope: MessageEnvelope) -> bool:
        """Finalize a successful delivery.

        Returns ``False`` (never raises) when the envelope was already
        finalized.
        """

    @abc.abstractmethod
    async def release(self, envelope: MessageEnvelope) -> None:
        """Give up a failed delivery without finalizing it so it can be redelivered."""

    @abc.abstractmethod
    async def discard(self, envelope: MessageEnvelope) -> None:
        """Finalize a delivery as dead: remove it from the normal delivery path."""

    async def __aenter__(self) -> "TransportClient":
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


__all__ = ["Topology", "TransportClient"]
