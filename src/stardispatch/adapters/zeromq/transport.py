"""ZeroMQ adapter – ZeroMQTransport.

The producer binds a PUSH socket, consumers connect PULL sockets and
compete for messages round-robin.  There is no broker: nothing is
persisted, nothing is acknowledged and nothing is redelivered.  A
successful :meth:`ZeroMQTransport.publish` only means the local send
completed, and a consumer that crashes mid-message loses it.

``connect`` on a PULL socket succeeds even when no producer is listening
yet; ZeroMQ reconnects in the background.
"""
from __future__ import annotations

import itertools
import logging
from typing import Any

from stardispatch.kernel.errors import ConnectionError, PublishError
from stardispatch.kernel.messaging import MessageEnvelope, SubstrateKind, Topology, TransportClient

logger = logging.getLogger(__name__)


def _require_zmq() -> Any:
    try:
        import zmq  # type: ignore[import-untyped]
        import zmq.asyncio  # type: ignore[import-untyped]  # noqa: F401
        return zmq
    except ImportError as exc:
        raise ImportError("Install 'stardispatch[zeromq]' (pyzmq) to use this adapter") from exc


class ZeroMQTransport(TransportClient):
    """Push/pull socket transport over ``zmq.asyncio``.

    Pass *bind* in the producing process and *connect* in consuming ones;
    a process may do both.
    """

    kind = SubstrateKind.PUSH_PULL

    def __init__(
        self,
        *,
        bind: str | None = None,
        connect: str | None = None,
        topology: Topology | None = None,
        linger_ms: int = 1000,
    ) -> None:
        _require_zmq()
        if bind is None and connect is None:
            raise ValueError("ZeroMQTransport needs a bind address, a connect address, or both")
        super().__init__(topology)
        self._bind = bind
        self._connect = connect
        self._linger_ms = linger_ms
        self._context: Any = None
        self._push: Any = None
        self._pull: Any = None
        self._sequence = itertools.count(1)
        self._in_flight: set[int] = set()

    @property
    def endpoint(self) -> str:
        return self._connect or self._bind or ""

    async def connect(self) -> None:
        zmq = _require_zmq()
        try:
            self._context = zmq.asyncio.Context()
            if self._bind is not None:
                self._push = self._context.socket(zmq.PUSH)
                self._push.setsockopt(zmq.LINGER, self._linger_ms)
                self._push.bind(self._bind)
                logger.info("zeromq.bound addr=%s", self._bind)
            if self._connect is not None:
                self._pull = self._context.socket(zmq.PULL)
                self._pull.connect(self._connect)
                logger.info("zeromq.connected addr=%s", self._connect)
        except Exception as exc:
            await self.close()
            raise ConnectionError(self.endpoint, f"Could not open ZeroMQ socket: {exc}", cause=exc) from exc

    async def close(self) -> None:
        for socket in (self._push, self._pull):
            if socket is not None:
                socket.close(linger=self._linger_ms)
        self._push = self._pull = None
        self._in_flight.clear()
        context, self._context = self._context, None
        if context is not None:
            context.term()

    async def _declare_topology(self) -> None:
        # sockets have no durable topology to create
        logger.debug("zeromq.no_topology bind=%s connect=%s", self._bind, self._connect)

    async def publish(self, payload: bytes) -> None:
        if self._push is None:
            raise PublishError("No PUSH socket is bound in this process", detail={"endpoint": self.endpoint})
        await self._push.send(payload)

    async def pull(self, timeout: float) -> MessageEnvelope | None:
        zmq = _require_zmq()
        if self._pull is None:
            raise ConnectionError(self.endpoint, "No PULL socket is connected in this process")
        try:
            events = await self._pull.poll(timeout=int(timeout * 1000), flags=zmq.POLLIN)
            if not events:
                return None
            payload = await self._pull.recv()
        except Exception as exc:
            raise ConnectionError(self.endpoint, f"ZeroMQ receive failed: {exc}", cause=exc) from exc
        tag = next(self._sequence)
        self._in_flight.add(tag)
        return MessageEnvelope(
            delivery_tag=tag,
            payload=payload,
            substrate=self.kind,
            message_id=f"zmq-{tag}",
        )

    async def ack(self, envelope: MessageEnvelope) -> bool:
        if envelope.delivery_tag not in self._in_flight:
            return False
        self._in_flight.discard(envelope.delivery_tag)
        return True

    async def release(self, envelope: MessageEnvelope) -> None:
        if envelope.delivery_tag in self._in_flight:
            self._in_flight.discard(envelope.delivery_tag)
            logger.warning("zeromq.message_dropped id=%s: push/pull sockets cannot redeliver", envelope.message_id)

    async def discard(self, envelope: MessageEnvelope) -> None:
        self._in_flight.discard(envelope.delivery_tag)


__all__ = ["ZeroMQTransport"]
