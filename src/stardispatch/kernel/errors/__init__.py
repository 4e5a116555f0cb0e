"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError     (application.py)
    │   └── ProcessingError
    └── InfrastructureError  (infrastructure.py)
        ├── ConnectionError
        ├── BootstrapError
        ├── PublishError
        ├── SerializationError
        └── TimeoutError
"""

from stardispatch.kernel.errors.application import ApplicationError, ProcessingError
from stardispatch.kernel.errors.base import BaseError
from stardispatch.kernel.errors.infrastructure import (
    BootstrapError,
    ConnectionError,
    InfrastructureError,
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
