"""Testing fakes – FakeClock factory."""
from __future__ import annotations

from datetime import UTC, datetime

from stardispatch.kernel.time import FrozenClock

EPOCH = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def FakeClock(start: datetime | None = None) -> FrozenClock:
    """Clock for enqueue stamps, lease deadlines and dead-letter times.

    Starts at :data:`EPOCH` unless *start* is given; move it with
    ``advance()`` to expire a polling-table lease.
    """
    return FrozenClock(start or EPOCH)


__all__ = ["EPOCH", "FakeClock"]
