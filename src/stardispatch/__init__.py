"""
stardispatch – reliable "star added" event dispatch.

Import path convention::

    from stardispatch.kernel.messaging import StarAddedEvent, TransportClient
    from stardispatch.application.dispatch import Bootstrapper, ConsumerLoop, Publisher
    from stardispatch.adapters.rabbitmq import RabbitMQTransport
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
