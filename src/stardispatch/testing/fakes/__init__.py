"""Testing fakes – in-memory doubles for kernel ports."""
from stardispatch.testing.fakes.clock import FakeClock
from stardispatch.testing.fakes.processor import RecordingProcessor
from stardispatch.testing.fakes.transport import InMemoryTransport, StoredMessage
from stardispatch.kernel.time import FrozenClock

__all__ = ["FakeClock", "FrozenClock", "InMemoryTransport", "RecordingProcessor", "StoredMessage"]
