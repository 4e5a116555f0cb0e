"""Testing support – in-memory doubles for the dispatch ports."""

from stardispatch.testing.fakes import FakeClock, InMemoryTransport, RecordingProcessor, StoredMessage

__all__ = ["FakeClock", "InMemoryTransport", "RecordingProcessor", "StoredMessage"]
