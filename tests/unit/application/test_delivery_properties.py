"""Delivery guarantees of the dispatch layer, checked per substrate kind.

Push/pull sockets are exempt from redelivery: their tests assert the
documented loss instead (no redelivery guarantee).
"""

from __future__ import annotations

import asyncio

import pytest

from stardispatch.application.dispatch import ConsumerLoop, DeliveryOutcome, Publisher
from stardispatch.kernel.messaging import JsonEventSerializer, StarAddedEvent, SubstrateKind
from stardispatch.kernel.time import FrozenClock
from stardispatch.testing import InMemoryTransport, RecordingProcessor

REDELIVERING = [SubstrateKind.BROADCAST, SubstrateKind.PARTITIONED_LOG, SubstrateKind.POLLING_TABLE]


def _wire(transport: InMemoryTransport, processor: RecordingProcessor) -> tuple[Publisher, ConsumerLoop]:
    asyncio.run(transport.connect())
    asyncio.run(transport.provision_topology())
    return Publisher(transport), ConsumerLoop(transport, processor, idle_sleep=0)


def _redelivery_window_elapses(transport: InMemoryTransport, clock: FrozenClock) -> None:
    if transport.kind is SubstrateKind.POLLING_TABLE:
        clock.advance(seconds=transport.visibility_timeout)
    elif transport.kind is SubstrateKind.BROADCAST:
        transport.drop_connection()


class TestAtLeastOnce:
    @pytest.mark.parametrize("kind", list(SubstrateKind))
    def test_every_published_event_is_processed(self, kind: SubstrateKind) -> None:
        events = [StarAddedEvent(id=i, title=f"game {i}", description="", star_count=1) for i in range(5)]
        consumer: ConsumerLoop

        def stop_when_done(_: bytes) -> None:
            if len(processor.processed) == len(events):
                consumer.stop()

        processor = RecordingProcessor(on_call=stop_when_done)
        publisher, consumer = _wire(InMemoryTransport(kind), processor)

        async def run() -> None:
            task = asyncio.create_task(consumer.run())
            for event in events:
                await publisher.publish(event)
            await asyncio.wait_for(task, 2.0)

        asyncio.run(run())
        serializer = JsonEventSerializer()
        assert sorted(serializer.deserialize(p).id for p in processor.processed) == [0, 1, 2, 3, 4]


class TestNoSilentLoss:
    @pytest.mark.parametrize("kind", REDELIVERING)
    def test_failed_message_is_observed_again(
        self, kind: SubstrateKind, zelda: StarAddedEvent, zelda_payload: bytes, clock: FrozenClock
    ) -> None:
        transport = InMemoryTransport(kind, clock=clock)
        processor = RecordingProcessor(fail_times=1)
        publisher, consumer = _wire(transport, processor)

        async def run() -> list[DeliveryOutcome]:
            await publisher.publish(zelda)
            first = await consumer.run_once()
            _redelivery_window_elapses(transport, clock)
            return [first, await consumer.run_once()]

        assert asyncio.run(run()) == [DeliveryOutcome.REDELIVERY_PENDING, DeliveryOutcome.FINALIZED]
        assert processor.calls == [zelda_payload, zelda_payload]

    def test_push_pull_has_no_redelivery_guarantee(self, zelda: StarAddedEvent) -> None:
        transport = InMemoryTransport(SubstrateKind.PUSH_PULL)
        processor = RecordingProcessor(fail_times=1)
        publisher, consumer = _wire(transport, processor)

        async def run() -> list[DeliveryOutcome]:
            await publisher.publish(zelda)
            return [await consumer.run_once(), await consumer.run_once()]

        assert transport.capabilities.supports_redelivery is False
        assert asyncio.run(run()) == [DeliveryOutcome.REDELIVERY_PENDING, DeliveryOutcome.IDLE]
        assert processor.processed == []

    def test_unacked_broadcast_delivery_survives_a_consumer_crash(self, zelda_payload: bytes) -> None:
        transport = InMemoryTransport(SubstrateKind.BROADCAST)
        asyncio.run(transport.connect())
        transport.enqueue_raw(zelda_payload)

        async def run() -> int | None:
            crashed = await transport.pull(0.01)
            assert crashed is not None
            transport.drop_connection()
            again = await transport.pull(0.01)
            assert again is not None
            return again.delivery_count

        assert asyncio.run(run()) == 2


class TestZeldaScenario:
    @pytest.mark.parametrize("kind", REDELIVERING)
    def test_finalize_then_redeliver_after_failure(
        self, kind: SubstrateKind, zelda: StarAddedEvent, zelda_payload: bytes, clock: FrozenClock
    ) -> None:
        transport = InMemoryTransport(kind, clock=clock)
        processor = RecordingProcessor()
        publisher, consumer = _wire(transport, processor)

        async def run() -> list[DeliveryOutcome]:
            outcomes = []
            await publisher.publish(zelda)
            outcomes.append(await consumer.run_once())  # processed and finalized
            outcomes.append(await consumer.run_once())  # nothing left
            processor.fail_next()
            await publisher.publish(zelda)
            outcomes.append(await consumer.run_once())  # processor fails
            _redelivery_window_elapses(transport, clock)
            outcomes.append(await consumer.run_once())  # observed again
            return outcomes

        assert asyncio.run(run()) == [
            DeliveryOutcome.FINALIZED,
            DeliveryOutcome.IDLE,
            DeliveryOutcome.REDELIVERY_PENDING,
            DeliveryOutcome.FINALIZED,
        ]
        assert processor.calls == [zelda_payload] * 3

    def test_polling_lease_hides_message_until_it_expires(
        self, zelda: StarAddedEvent, clock: FrozenClock
    ) -> None:
        transport = InMemoryTransport(SubstrateKind.POLLING_TABLE, clock=clock, visibility_timeout=30)
        processor = RecordingProcessor(fail_times=1)
        publisher, consumer = _wire(transport, processor)

        async def run() -> list[DeliveryOutcome]:
            await publisher.publish(zelda)
            outcomes = [await consumer.run_once(), await consumer.run_once()]
            clock.advance(seconds=29)
            outcomes.append(await consumer.run_once())
            clock.advance(seconds=1)
            outcomes.append(await consumer.run_once())
            return outcomes

        assert asyncio.run(run()) == [
            DeliveryOutcome.REDELIVERY_PENDING,
            DeliveryOutcome.IDLE,
            DeliveryOutcome.IDLE,
            DeliveryOutcome.FINALIZED,
        ]
