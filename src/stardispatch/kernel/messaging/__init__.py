"""Kernel messaging – events, envelopes, transport and sink ports."""
from stardispatch.kernel.messaging.capabilities import (
    DeliveryCapabilities,
    Ordering,
    SubstrateKind,
    capabilities_for,
)
from stardispatch.kernel.messaging.message import (
    EventProcessor,
    MessageEnvelope,
    MessageId,
    MessageSerializer,
    StarAddedEvent,
)
from stardispatch.kernel.messaging.codec import JsonEventSerializer
from stardispatch.kernel.messaging.transport import Topology, TransportClient
from stardispatch.kernel.messaging.dead_letter import DeadLetterEntry, DeadLetterStore
from stardispatch.kernel.messaging.inbox import InboxStore, InMemoryInboxStore

__all__ = [
    "DeadLetterEntry",
    "DeadLetterStore",
    "DeliveryCapabilities",
    "EventProcessor",
    "InMemoryInboxStore",
    "InboxStore",
    "JsonEventSerializer",
    "MessageEnvelope",
    "MessageId",
    "MessageSerializer",
    "Ordering",
    "StarAddedEvent",
    "SubstrateKind",
    "Topology",
    "TransportClient",
    "capabilities_for",
]
