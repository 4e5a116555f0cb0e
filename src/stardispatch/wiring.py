"""Wiring – build a TransportClient from settings and bring up a Publisher.

The write-path service calls :func:`start_publisher` once at startup and
keeps the returned :class:`Publisher`; the worker builds its consumer side
through :func:`create_transport` with ``role="consumer"``.
"""
from __future__ import annotations

import logging
from typing import Literal

from stardispatch.adapters.kafka import KafkaTransport
from stardispatch.adapters.pgmq import PgmqTransport
from stardispatch.adapters.rabbitmq import RabbitMQTransport
from stardispatch.adapters.zeromq import ZeroMQTransport
from stardispatch.application.dispatch import Bootstrapper, Publisher
from stardispatch.config import DispatchSettings
from stardispatch.kernel.messaging import Topology, TransportClient

logger = logging.getLogger(__name__)

type Role = Literal["producer", "consumer"]


def topology_from(settings: DispatchSettings) -> Topology:
    return Topology(
        exchange=settings.exchange,
        queue=settings.queue,
        topic=settings.topic,
        group_id=settings.group_id,
        dead_letter_queue=settings.dead_letter_queue or None,
    )


def create_transport(settings: DispatchSettings, *, role: Role = "consumer") -> TransportClient:
    """Build the transport configured by ``settings.substrate`` for *role*."""
    topology = topology_from(settings)
    if settings.substrate == "rabbitmq":
        return RabbitMQTransport(settings.rabbitmq_url, topology)
    if settings.substrate == "zeromq":
        if role == "producer":
            return ZeroMQTransport(bind=settings.publisher_bind, topology=topology)
        return ZeroMQTransport(connect=settings.publisher_addr, topology=topology)
    if settings.substrate == "kafka":
        return KafkaTransport(
            settings.kafka_brokers,
            topology,
            # the consumer only produces to its dead-letter topic
            produce=role == "producer" or topology.dead_letter_queue is not None,
            consume=role == "consumer",
        )
    if settings.substrate == "pgmq":
        return PgmqTransport(
            settings.database_url,
            topology,
            visibility_timeout=settings.visibility_timeout,
            release_delay=None if settings.release_delay < 0 else settings.release_delay,
        )
    raise ValueError(f"Unknown substrate {settings.substrate!r}")


def consumer_can_publish(settings: DispatchSettings) -> bool:
    """Whether the consumer-role transport can send, e.g. to replay dead letters.

    A ZeroMQ consumer only holds a PULL socket and a Kafka consumer only
    starts a producer when a dead-letter topic is configured.
    """
    if settings.substrate == "zeromq":
        return False
    if settings.substrate == "kafka":
        return bool(settings.dead_letter_queue)
    return True


def bootstrapper_for(transport: TransportClient, settings: DispatchSettings) -> Bootstrapper:
    return Bootstrapper(
        transport,
        max_attempts=settings.connect_attempts,
        retry_interval=settings.connect_interval,
    )


async def start_publisher(
    settings: DispatchSettings,
    transport: TransportClient | None = None,
) -> Publisher:
    """Connect and provision a producer-side transport, return its Publisher.

    Raises :class:`~stardispatch.kernel.errors.BootstrapError` when the
    transport stays unreachable; the caller should refuse to start serving.
    """
    transport = transport or create_transport(settings, role="producer")
    await bootstrapper_for(transport, settings).bootstrap()
    logger.info("wiring.publisher_ready substrate=%s endpoint=%s", settings.substrate, transport.endpoint)
    return Publisher(transport, timeout=settings.publish_timeout)


__all__ = ["Role", "bootstrapper_for", "consumer_can_publish", "create_transport", "start_publisher", "topology_from"]
