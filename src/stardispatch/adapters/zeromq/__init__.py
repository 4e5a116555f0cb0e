"""ZeroMQ adapter – PUSH/PULL socket transport."""
from stardispatch.adapters.zeromq.transport import ZeroMQTransport

__all__ = ["ZeroMQTransport"]
