"""Shared fixtures for the stardispatch test-suite."""
from __future__ import annotations

import pytest

from stardispatch.kernel.messaging import JsonEventSerializer, StarAddedEvent
from stardispatch.kernel.time import FrozenClock
from stardispatch.testing import FakeClock


@pytest.fixture()
def zelda() -> StarAddedEvent:
    return StarAddedEvent(id=7, title="Zelda", description="...", star_count=5)


@pytest.fixture()
def zelda_payload(zelda: StarAddedEvent) -> bytes:
    return JsonEventSerializer().serialize(zelda)


@pytest.fixture()
def clock() -> FrozenClock:
    return FakeClock()
