"""Kernel messaging – event, envelope and processor primitives."""
from __future__ import annotations

import abc
import dataclasses
from datetime import datetime
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from stardispatch.kernel.messaging.capabilities import SubstrateKind

T = TypeVar("T")

type MessageId = str


@dataclasses.dataclass(frozen=True)
class StarAddedEvent:
    """A game's star count changed.

    Produced once per write and never mutated afterwards.
    """

    id: int
    title: str
    description: str
    star_count: int

    @property
    def dedup_key(self) -> str:
        """Identifies one write: star counts only grow, so ``(id, stars)`` is unique."""
        return f"{self.id}:{self.star_count}"

    def to_wire(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "stars": self.star_count,
        }


@dataclasses.dataclass(frozen=True)
class MessageEnvelope:
    """A delivered message plus substrate-specific delivery metadata.

    ``delivery_tag`` is opaque and only meaningful to the transport that
    produced the envelope; it is what ``ack``/``release``/``discard`` act on.
    ``delivery_count`` is 1-based and ``None`` where the substrate cannot
    count deliveries (push/pull sockets).
    """

    delivery_tag: Any
    payload: bytes
    substrate: SubstrateKind
    message_id: MessageId = ""
    delivery_count: int | None = None
    enqueued_at: datetime | None = None
    visibility_deadline: datetime | None = None
    partition: int | None = None
    partition_offset: int | None = None

    @property
    def is_redelivery(self) -> bool:
        return self.delivery_count is not None and self.delivery_count > 1


class MessageSerializer(abc.ABC, Generic[T]):
    """Port: serialize / deserialize message payloads."""

    @abc.abstractmethod
    def serialize(self, payload: T) -> bytes: ...

    @abc.abstractmethod
    def deserialize(self, data: bytes) -> T: ...


@runtime_checkable
class EventProcessor(Protocol):
    """Port: side effect run for each delivered payload (e.g. send an email).

    Must be idempotent: the consumer loop invokes it at least once per
    delivered message, possibly more. Failure is signalled by raising.
    """

    async def process(self, payload: bytes) -> None: ...


__all__ = [
    "EventProcessor",
    "MessageEnvelope",
    "MessageId",
    "MessageSerializer",
    "StarAddedEvent",
]
