"""Kernel – framework-agnostic building blocks."""

from stardispatch.kernel.errors import (
    ApplicationError,
    BaseError,
    BootstrapError,
    ConnectionError,
    InfrastructureError,
    ProcessingError,
    PublishError,
    SerializationError,
    TimeoutError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "BootstrapError",
    "ConnectionError",
    "InfrastructureError",
    "ProcessingError",
    "PublishError",
    "SerializationError",
    "TimeoutError",
]
