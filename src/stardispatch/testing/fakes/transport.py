"""Testing fakes – InMemoryTransport.

Emulates the delivery semantics of each substrate kind in memory so the
consumer loop can be exercised without a broker:

* ``BROADCAST`` – unacked messages stay owned until ack/release;
  :meth:`InMemoryTransport.drop_connection` requeues all of them.
* ``PUSH_PULL`` – a pulled message is gone; release loses it.
* ``PARTITIONED_LOG`` – one partition with a committed offset and a fetch
  position; release seeks back to the released offset.
* ``POLLING_TABLE`` – each pull leases the message for
  ``visibility_timeout`` seconds on the supplied clock.
"""
from __future__ import annotations

import asyncio
import dataclasses
from datetime import datetime, timedelta

from stardispatch.kernel.errors import ConnectionError, PublishError
from stardispatch.kernel.messaging import MessageEnvelope, SubstrateKind, Topology, TransportClient
from stardispatch.kernel.time import Clock, FrozenClock


@dataclasses.dataclass
class StoredMessage:
    offset: int
    payload: bytes
    enqueued_at: datetime
    read_count: int = 0
    visible_at: datetime | None = None
    in_flight: bool = False
    state: str = "ready"  # ready | acked | dead | lost


class InMemoryTransport(TransportClient):
    """In-memory transport for tests; not safe across processes."""

    def __init__(
        self,
        kind: SubstrateKind = SubstrateKind.POLLING_TABLE,
        topology: Topology | None = None,
        *,
        clock: Clock | None = None,
        visibility_timeout: float = 30.0,
        fail_connect_times: int = 0,
        unreachable: bool = False,
        fail_publish: bool = False,
        fail_pull_times: int = 0,
        endpoint: str = "memory://local",
    ) -> None:
        super().__init__(topology)
        self.kind = kind  # type: ignore[misc]
        self.clock = clock or FrozenClock()
        self.visibility_timeout = visibility_timeout
        self.fail_connect_times = fail_connect_times
        self.unreachable = unreachable
        self.fail_publish = fail_publish
        self.fail_pull_times = fail_pull_times
        self._endpoint = endpoint
        self.messages: list[StoredMessage] = []
        self.connected = False
        self.connect_attempts = 0
        self.declare_count = 0
        self.close_count = 0
        self._position = 0
        self._committed = 0

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def connect(self) -> None:
        self.connect_attempts += 1
        if self.unreachable:
            raise ConnectionError(self._endpoint, "endpoint unreachable")
        if self.fail_connect_times > 0:
            self.fail_connect_times -= 1
            raise ConnectionError(self._endpoint, "connection refused")
        self.connected = True

    async def close(self) -> None:
        self.close_count += 1
        self.connected = False

    async def _declare_topology(self) -> None:
        self.declare_count += 1

    async def publish(self, payload: bytes) -> None:
        if not self.connected:
            raise PublishError("transport is not connected")
        if self.fail_publish:
            raise PublishError("broker rejected the message")
        self.enqueue_raw(payload)

    def enqueue_raw(self, payload: bytes) -> StoredMessage:
        """Append *payload* as if a producer had published it."""
        message = StoredMessage(offset=len(self.messages), payload=payload, enqueued_at=self.clock.now())
        self.messages.append(message)
        return message

    async def pull(self, timeout: float) -> MessageEnvelope | None:
        if not self.connected:
            raise ConnectionError(self._endpoint, "transport is not connected")
        if self.fail_pull_times > 0:
            self.fail_pull_times -= 1
            raise ConnectionError(self._endpoint, "connection reset")
        message = self._next_available()
        if message is None:
            await asyncio.sleep(min(timeout, 0.005))
            return None

        now = self.clock.now()
        message.read_count += 1
        message.in_flight = True
        deadline = None
        if self.kind is SubstrateKind.POLLING_TABLE:
            deadline = now + timedelta(seconds=self.visibility_timeout)
            message.visible_at = deadline
        elif self.kind is SubstrateKind.PARTITIONED_LOG:
            self._position = message.offset + 1
        elif self.kind is SubstrateKind.PUSH_PULL:
            message.state = "lost"

        counted = self.capabilities.exposes_delivery_count
        is_log = self.kind is SubstrateKind.PARTITIONED_LOG
        return MessageEnvelope(
            delivery_tag=message.offset,
            payload=message.payload,
            substrate=self.kind,
            message_id=f"mem-{message.offset + 1}",
            delivery_count=message.read_count if counted else None,
            enqueued_at=message.enqueued_at,
            visibility_deadline=deadline,
            partition=0 if is_log else None,
            partition_offset=message.offset if is_log else None,
        )

    def _next_available(self) -> StoredMessage | None:
        if self.kind is SubstrateKind.PARTITIONED_LOG:
            if self._position < len(self.messages):
                return self.messages[self._position]
            return None
        now = self.clock.now()
        for message in self.messages:
            if message.state != "ready":
                continue
            if self.kind is SubstrateKind.POLLING_TABLE:
                if message.visible_at is None or message.visible_at <= now:
                    return message
            elif not message.in_flight:
                return message
        return None

    async def ack(self, envelope: MessageEnvelope) -> bool:
        message = self.messages[envelope.delivery_tag]
        if self.kind is SubstrateKind.PARTITIONED_LOG:
            if message.offset < self._committed:
                return False
            self._committed = message.offset + 1
            message.state = "acked"
            message.in_flight = False
            return True
        if self.kind is SubstrateKind.PUSH_PULL:
            if not message.in_flight:
                return False
            message.in_flight = False
            message.state = "acked"
            return True
        if message.state != "ready":
            return False
        message.state = "acked"
        message.in_flight = False
        return True

    async def release(self, envelope: MessageEnvelope) -> None:
        message = self.messages[envelope.delivery_tag]
        if not message.in_flight:
            return
        message.in_flight = False
        if self.kind is SubstrateKind.PARTITIONED_LOG:
            self._position = min(self._position, message.offset)

    async def discard(self, envelope: MessageEnvelope) -> None:
        message = self.messages[envelope.delivery_tag]
        message.in_flight = False
        if self.kind is SubstrateKind.PARTITIONED_LOG:
            self._committed = max(self._committed, message.offset + 1)
        if message.state in ("ready", "lost"):
            message.state = "dead"

    def drop_connection(self) -> None:
        """Return every unacked broadcast/log delivery to the queue."""
        for message in self.messages:
            if message.in_flight and message.state == "ready":
                message.in_flight = False
        if self.kind is SubstrateKind.PARTITIONED_LOG:
            self._position = self._committed

    def in_state(self, state: str) -> list[StoredMessage]:
        return [m for m in self.messages if m.state == state]


__all__ = ["InMemoryTransport", "StoredMessage"]
