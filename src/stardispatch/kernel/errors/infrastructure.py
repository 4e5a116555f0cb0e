"""Infrastructure errors – transport I/O failures."""

from __future__ import annotations

from typing import Any

from stardispatch.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a processing failure."""

    default_code = "infrastructure_error"


class ConnectionError(InfrastructureError):  # noqa: A001
    """Failed to connect to a transport (broker, socket, database)."""

    default_code = "connection_error"
    transient = True

    def __init__(
        self,
        resource: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Could not connect to '{resource}'", **kwargs)
        self.resource = resource


class BootstrapError(InfrastructureError):
    """The connection attempt budget was exhausted at startup.

    Fatal: the process must not start serving without a working transport.
    """

    default_code = "bootstrap_failed"

    def __init__(
        self,
        resource: str,
        attempts: int,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Gave up connecting to '{resource}' after {attempts} attempts",
            detail={"resource": resource, "attempts": attempts},
            **kwargs,
        )
        self.resource = resource
        self.attempts = attempts


class PublishError(InfrastructureError):
    """The transport did not accept an event."""

    default_code = "publish_failed"
    transient = True


class TimeoutError(InfrastructureError):  # noqa: A001
    """An I/O operation exceeded its deadline."""

    default_code = "infrastructure_timeout"
    transient = True


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


__all__ = [
    "BootstrapError",
    "ConnectionError",
    "InfrastructureError",
    "PublishError",
    "SerializationError",
    "TimeoutError",
]
