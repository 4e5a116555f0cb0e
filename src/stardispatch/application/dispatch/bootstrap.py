"""Dispatch – Bootstrapper: connect with a bounded retry budget, then provision."""
from __future__ import annotations

import logging

from stardispatch.kernel.errors import BootstrapError, ConnectionError
from stardispatch.kernel.messaging import TransportClient
from stardispatch.resilience.retry import ConstantBackoff, RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 120
DEFAULT_RETRY_INTERVAL = 0.25


class Bootstrapper:
    """Bring a :class:`TransportClient` to a usable state.

    With the defaults a permanently unreachable endpoint is given up on
    after roughly 30 seconds (120 attempts, 250 ms apart) with a
    :class:`BootstrapError`; the transport is closed before raising so no
    half-open client is left behind.
    """

    def __init__(
        self,
        transport: TransportClient,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_interval: float = DEFAULT_RETRY_INTERVAL,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._transport = transport
        self._retry = retry_policy or RetryPolicy(
            max_attempts=max_attempts,
            backoff=ConstantBackoff(retry_interval),
            retryable_exceptions=(ConnectionError,),
        )

    @property
    def max_attempts(self) -> int:
        return self._retry.max_attempts

    async def connect(self) -> TransportClient:
        endpoint = self._transport.endpoint
        logger.info(
            "bootstrap.connecting kind=%s endpoint=%s max_attempts=%d",
            self._transport.kind.value,
            endpoint,
            self._retry.max_attempts,
        )
        try:
            await self._retry.execute_async(self._transport.connect)
        except ConnectionError as exc:
            await self._abort()
            logger.critical("bootstrap.exhausted endpoint=%s attempts=%d", endpoint, self._retry.max_attempts)
            raise BootstrapError(endpoint, self._retry.max_attempts, cause=exc) from exc
        logger.info("bootstrap.connected kind=%s endpoint=%s", self._transport.kind.value, endpoint)
        return self._transport

    async def provision_topology(self) -> None:
        try:
            await self._transport.provision_topology()
        except Exception:
            await self._abort()
            raise

    async def bootstrap(self) -> TransportClient:
        """Connect, then provision the durable topology."""
        transport = await self.connect()
        await self.provision_topology()
        return transport

    async def _abort(self) -> None:
        try:
            await self._transport.close()
        except Exception as exc:  # noqa: BLE001
            logger.warning("bootstrap.close_failed exc=%r", exc)


__all__ = ["DEFAULT_MAX_ATTEMPTS", "DEFAULT_RETRY_INTERVAL", "Bootstrapper"]
