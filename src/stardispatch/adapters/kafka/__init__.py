"""Kafka adapter – partitioned append-log transport."""
from stardispatch.adapters.kafka.transport import KafkaTransport

__all__ = ["KafkaTransport"]
