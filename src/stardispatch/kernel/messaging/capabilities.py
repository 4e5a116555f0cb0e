"""Kernel messaging – substrate kinds and their delivery guarantees.

Each transport declares one :class:`SubstrateKind`; callers ask the
matching :class:`DeliveryCapabilities` instead of assuming every substrate
redelivers, persists or orders the same way.
"""
from __future__ import annotations

import dataclasses
from enum import Enum


class SubstrateKind(str, Enum):
    BROADCAST = "BROADCAST"
    PUSH_PULL = "PUSH_PULL"
    PARTITIONED_LOG = "PARTITIONED_LOG"
    POLLING_TABLE = "POLLING_TABLE"


class Ordering(str, Enum):
    NONE = "NONE"
    PER_PARTITION = "PER_PARTITION"
    FIFO_BEST_EFFORT = "FIFO_BEST_EFFORT"


@dataclasses.dataclass(frozen=True)
class DeliveryCapabilities:
    kind: SubstrateKind
    supports_redelivery: bool
    durable: bool
    exposes_delivery_count: bool
    ordering: Ordering
    fan_out: str
    redelivery_trigger: str


_CAPABILITIES: dict[SubstrateKind, DeliveryCapabilities] = {
    SubstrateKind.BROADCAST: DeliveryCapabilities(
        kind=SubstrateKind.BROADCAST,
        supports_redelivery=True,
        durable=True,
        exposes_delivery_count=True,
        ordering=Ordering.NONE,
        fan_out="every bound queue gets a copy",
        redelivery_trigger="nack or connection drop",
    ),
    SubstrateKind.PUSH_PULL: DeliveryCapabilities(
        kind=SubstrateKind.PUSH_PULL,
        supports_redelivery=False,
        durable=False,
        exposes_delivery_count=False,
        ordering=Ordering.NONE,
        fan_out="competing consumers, round-robin",
        redelivery_trigger="none: a crashed consumer loses its in-flight message",
    ),
    SubstrateKind.PARTITIONED_LOG: DeliveryCapabilities(
        kind=SubstrateKind.PARTITIONED_LOG,
        supports_redelivery=True,
        durable=True,
        exposes_delivery_count=True,
        ordering=Ordering.PER_PARTITION,
        fan_out="one copy per consumer group",
        redelivery_trigger="offset not committed",
    ),
    SubstrateKind.POLLING_TABLE: DeliveryCapabilities(
        kind=SubstrateKind.POLLING_TABLE,
        supports_redelivery=True,
        durable=True,
        exposes_delivery_count=True,
        ordering=Ordering.FIFO_BEST_EFFORT,
        fan_out="competing consumers via row locking",
        redelivery_trigger="visibility timeout expiry",
    ),
}


def capabilities_for(kind: SubstrateKind) -> DeliveryCapabilities:
    return _CAPABILITIES[kind]


__all__ = ["DeliveryCapabilities", "Ordering", "SubstrateKind", "capabilities_for"]
