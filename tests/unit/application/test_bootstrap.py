"""Unit tests for the Bootstrapper – bounded connect retry and provisioning."""

from __future__ import annotations

import asyncio

import pytest

from stardispatch.application.dispatch import Bootstrapper
from stardispatch.application.dispatch.bootstrap import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_INTERVAL
from stardispatch.kernel.errors import BootstrapError, ConnectionError
from stardispatch.resilience.retry import ConstantBackoff, RetryPolicy
from stardispatch.testing import InMemoryTransport


class _BrokenTopologyTransport(InMemoryTransport):
    async def _declare_topology(self) -> None:
        raise RuntimeError("access refused")


class TestBootstrapperConnect:
    def test_defaults_give_thirty_second_budget(self) -> None:
        assert DEFAULT_MAX_ATTEMPTS == 120
        assert DEFAULT_RETRY_INTERVAL == 0.25
        assert Bootstrapper(InMemoryTransport()).max_attempts == 120

    def test_connects_first_time(self) -> None:
        transport = InMemoryTransport()
        result = asyncio.run(Bootstrapper(transport, retry_interval=0).connect())
        assert result is transport
        assert transport.connected is True
        assert transport.connect_attempts == 1

    def test_retries_transient_failures(self) -> None:
        transport = InMemoryTransport(fail_connect_times=3)
        asyncio.run(Bootstrapper(transport, max_attempts=5, retry_interval=0).connect())
        assert transport.connected is True
        assert transport.connect_attempts == 4

    def test_gives_up_after_budget(self) -> None:
        transport = InMemoryTransport(unreachable=True)
        with pytest.raises(BootstrapError) as exc_info:
            asyncio.run(Bootstrapper(transport, max_attempts=5, retry_interval=0).connect())
        assert exc_info.value.attempts == 5
        assert exc_info.value.resource == "memory://local"
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert transport.connect_attempts == 5

    def test_exhaustion_closes_transport(self) -> None:
        transport = InMemoryTransport(unreachable=True)
        with pytest.raises(BootstrapError):
            asyncio.run(Bootstrapper(transport, max_attempts=2, retry_interval=0).connect())
        assert transport.close_count == 1
        assert transport.connected is False

    def test_sleeps_fixed_interval_between_attempts(self) -> None:
        sleeps: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            sleeps.append(seconds)

        policy = RetryPolicy(
            max_attempts=4,
            backoff=ConstantBackoff(0.25),
            retryable_exceptions=(ConnectionError,),
            sleep=fake_sleep,
        )
        transport = InMemoryTransport(unreachable=True)
        with pytest.raises(BootstrapError):
            asyncio.run(Bootstrapper(transport, retry_policy=policy).connect())
        assert sleeps == [0.25, 0.25, 0.25]

    def test_logs_each_failed_attempt(self, caplog: pytest.LogCaptureFixture) -> None:
        transport = InMemoryTransport(fail_connect_times=2)
        with caplog.at_level("WARNING"):
            asyncio.run(Bootstrapper(transport, max_attempts=3, retry_interval=0).connect())
        attempts = [r for r in caplog.records if "retry.attempt_failed" in r.getMessage()]
        assert len(attempts) == 2


class TestBootstrapperProvision:
    def test_bootstrap_connects_and_provisions(self) -> None:
        transport = InMemoryTransport()
        asyncio.run(Bootstrapper(transport, retry_interval=0).bootstrap())
        assert transport.connected is True
        assert transport.declare_count == 1

    def test_provisioning_is_idempotent(self) -> None:
        transport = InMemoryTransport()
        bootstrapper = Bootstrapper(transport, retry_interval=0)

        async def run() -> None:
            await bootstrapper.bootstrap()
            await bootstrapper.provision_topology()
            await transport.provision_topology()

        asyncio.run(run())
        assert transport.declare_count == 1

    def test_concurrent_provisioning_declares_once(self) -> None:
        transport = InMemoryTransport()

        async def run() -> None:
            await transport.connect()
            await asyncio.gather(*(transport.provision_topology() for _ in range(5)))

        asyncio.run(run())
        assert transport.declare_count == 1

    def test_provision_failure_closes_and_reraises(self) -> None:
        transport = _BrokenTopologyTransport()
        with pytest.raises(RuntimeError, match="access refused"):
            asyncio.run(Bootstrapper(transport, retry_interval=0).bootstrap())
        assert transport.close_count == 1

    def test_unreachable_bootstrap_never_provisions(self) -> None:
        transport = InMemoryTransport(unreachable=True)
        with pytest.raises(BootstrapError):
            asyncio.run(Bootstrapper(transport, max_attempts=2, retry_interval=0).bootstrap())
        assert transport.declare_count == 0
