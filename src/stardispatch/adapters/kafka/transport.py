"""Kafka adapter – KafkaTransport.

Events go to one topic (``game-events``) keyed ``game-star-event``; with a
single key every event lands on the same partition and is consumed in
order.  Consumers join a group (``email-service-group``) with auto-commit
disabled: an offset is committed only once the message was processed, and
a failed message is re-read by seeking back to it.

Kafka does not count deliveries.  The count on each envelope is tracked
by this process, so it restarts at 1 after a rebalance or a restart.
"""
from __future__ import annotations

import logging
from collections import Counter
from datetime import UTC, datetime
from typing import Any

from stardispatch.kernel.errors import ConnectionError, PublishError
from stardispatch.kernel.messaging import MessageEnvelope, SubstrateKind, Topology, TransportClient

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_KEY = b"game-star-event"


def _require_aiokafka() -> Any:
    try:
        import aiokafka  # type: ignore[import-untyped]
        import aiokafka.admin  # type: ignore[import-untyped]  # noqa: F401
        return aiokafka
    except ImportError as exc:
        raise ImportError("Install 'stardispatch[kafka]' (aiokafka) to use this adapter") from exc


class KafkaTransport(TransportClient):
    """Partitioned-log transport over aiokafka."""

    kind = SubstrateKind.PARTITIONED_LOG

    def __init__(
        self,
        brokers: list[str] | str = "localhost:9092",
        topology: Topology | None = None,
        *,
        produce: bool = True,
        consume: bool = True,
        message_key: bytes = DEFAULT_MESSAGE_KEY,
        num_partitions: int = 1,
        replication_factor: int = 1,
        auto_offset_reset: str = "earliest",
    ) -> None:
        _require_aiokafka()
        super().__init__(topology)
        self._brokers = brokers.split(",") if isinstance(brokers, str) else list(brokers)
        self._produce = produce
        self._consume = consume
        self._message_key = message_key
        self._num_partitions = num_partitions
        self._replication_factor = replication_factor
        self._auto_offset_reset = auto_offset_reset
        self._admin: Any = None
        self._producer: Any = None
        self._consumer: Any = None
        self._in_flight: dict[tuple[str, int, int], Any] = {}
        self._deliveries: Counter[tuple[str, int, int]] = Counter()

    @property
    def endpoint(self) -> str:
        return ",".join(self._brokers)

    async def connect(self) -> None:
        aiokafka = _require_aiokafka()
        try:
            self._admin = aiokafka.admin.AIOKafkaAdminClient(bootstrap_servers=self._brokers)
            await self._admin.start()
            if self._produce:
                self._producer = aiokafka.AIOKafkaProducer(bootstrap_servers=self._brokers, acks="all")
                await self._producer.start()
        except Exception as exc:
            await self.close()
            raise ConnectionError(self.endpoint, f"Could not connect to Kafka: {exc}", cause=exc) from exc

    async def close(self) -> None:
        consumer, self._consumer = self._consumer, None
        producer, self._producer = self._producer, None
        admin, self._admin = self._admin, None
        self._in_flight.clear()
        self._deliveries.clear()
        if consumer is not None:
            await consumer.stop()
        if producer is not None:
            await producer.stop()
        if admin is not None:
            await admin.close()

    async def _declare_topology(self) -> None:
        aiokafka = _require_aiokafka()
        wanted = [self.topology.topic]
        if self.topology.dead_letter_queue:
            wanted.append(self.topology.dead_letter_queue)
        existing = set(await self._admin.list_topics())
        missing = [name for name in wanted if name not in existing]
        if not missing:
            return
        try:
            await self._admin.create_topics(
                [
                    aiokafka.admin.NewTopic(
                        name=name,
                        num_partitions=self._num_partitions,
                        replication_factor=self._replication_factor,
                    )
                    for name in missing
                ]
            )
        except Exception:
            # another process may have created them in the meantime
            existing = set(await self._admin.list_topics())
            if any(name not in existing for name in missing):
                raise
        logger.info("kafka.topics_created topics=%s", missing)

    async def publish(self, payload: bytes) -> None:
        if self._producer is None:
            raise PublishError("Kafka producer is not started", detail={"endpoint": self.endpoint})
        metadata = await self._producer.send_and_wait(self.topology.topic, value=payload, key=self._message_key)
        logger.debug(
            "kafka.published topic=%s partition=%s offset=%s",
            self.topology.topic,
            getattr(metadata, "partition", None),
            getattr(metadata, "offset", None),
        )

    async def _ensure_consumer(self) -> Any:
        if self._consumer is None:
            if not self._consume:
                raise ConnectionError(self.endpoint, "Kafka transport was built without a consumer")
            aiokafka = _require_aiokafka()
            consumer = aiokafka.AIOKafkaConsumer(
                self.topology.topic,
                bootstrap_servers=self._brokers,
                group_id=self.topology.group_id,
                enable_auto_commit=False,
                auto_offset_reset=self._auto_offset_reset,
            )
            await consumer.start()
            self._consumer = consumer
            logger.info("kafka.consuming topic=%s group=%s", self.topology.topic, self.topology.group_id)
        return self._consumer

    async def pull(self, timeout: float) -> MessageEnvelope | None:
        try:
            consumer = await self._ensure_consumer()
            batches = await consumer.getmany(timeout_ms=int(timeout * 1000), max_records=1)
        except ConnectionError:
            raise
        except Exception as exc:
            raise ConnectionError(self.endpoint, f"Kafka fetch failed: {exc}", cause=exc) from exc

        for partition, records in batches.items():
            if not records:
                continue
            record = records[0]
            tag = (record.topic, record.partition, record.offset)
            self._in_flight[tag] = partition
            self._deliveries[tag] += 1
            return MessageEnvelope(
                delivery_tag=tag,
                payload=record.value,
                substrate=self.kind,
                message_id=f"{record.topic}-{record.partition}-{record.offset}",
                delivery_count=self._deliveries[tag],
                enqueued_at=datetime.fromtimestamp(record.timestamp / 1000, UTC),
                partition=record.partition,
                partition_offset=record.offset,
            )
        return None

    async def ack(self, envelope: MessageEnvelope) -> bool:
        partition = self._in_flight.pop(envelope.delivery_tag, None)
        if partition is None:
            return False
        await self._commit_past(envelope, partition)
        return True

    async def release(self, envelope: MessageEnvelope) -> None:
        partition = self._in_flight.pop(envelope.delivery_tag, None)
        if partition is None or self._consumer is None:
            return
        # the next fetch re-reads the uncommitted offset
        self._consumer.seek(partition, envelope.partition_offset)

    async def discard(self, envelope: MessageEnvelope) -> None:
        partition = self._in_flight.pop(envelope.delivery_tag, None)
        if partition is None:
            return
        dead_letter_topic = self.topology.dead_letter_queue
        if dead_letter_topic and self._producer is not None:
            try:
                await self._producer.send_and_wait(dead_letter_topic, value=envelope.payload, key=self._message_key)
            except Exception as exc:
                self._in_flight[envelope.delivery_tag] = partition
                raise ConnectionError(self.endpoint, f"Kafka dead-letter send failed: {exc}", cause=exc) from exc
        await self._commit_past(envelope, partition)

    async def _commit_past(self, envelope: MessageEnvelope, partition: Any) -> None:
        try:
            await self._consumer.commit({partition: envelope.partition_offset + 1})
        except Exception as exc:
            self._consumer.seek(partition, envelope.partition_offset)
            raise ConnectionError(self.endpoint, f"Kafka offset commit failed: {exc}", cause=exc) from exc
        self._deliveries.pop(envelope.delivery_tag, None)


__all__ = ["DEFAULT_MESSAGE_KEY", "KafkaTransport"]
