"""RabbitMQ adapter – broadcast (fanout) exchange transport."""
from stardispatch.adapters.rabbitmq.transport import RabbitMQTransport

__all__ = ["RabbitMQTransport"]
