"""Dispatch – bootstrap, publish, consume and finalize star events."""
from stardispatch.application.dispatch.bootstrap import Bootstrapper
from stardispatch.application.dispatch.consumer import ConsumerLoop, DeliveryOutcome
from stardispatch.application.dispatch.dead_letter import InMemoryDeadLetterStore
from stardispatch.application.dispatch.idempotency import DeduplicatingProcessor
from stardispatch.application.dispatch.publisher import Publisher

__all__ = [
    "Bootstrapper",
    "ConsumerLoop",
    "DeduplicatingProcessor",
    "DeliveryOutcome",
    "InMemoryDeadLetterStore",
    "Publisher",
]
