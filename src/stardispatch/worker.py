"""Email worker – consume star events until SIGINT/SIGTERM.

Run with::

    DISPATCH_SUBSTRATE=pgmq python -m stardispatch.worker

Exit codes: ``0`` graceful shutdown, ``1`` transport never became
reachable (or its topology could not be provisioned), ``2`` invalid
configuration.
"""
from __future__ import annotations

import asyncio
import signal
import sys

from stardispatch.application.dispatch import ConsumerLoop, DeduplicatingProcessor, InMemoryDeadLetterStore
from stardispatch.application.email import EmailNotificationProcessor, LoggingEmailSender
from stardispatch.config import ConfigError, DispatchSettings, DotenvSettingsLoader
from stardispatch.kernel.errors import BootstrapError
from stardispatch.kernel.messaging import EventProcessor, TransportClient
from stardispatch.observability import JsonLoggerFactory, get_logger
from stardispatch.wiring import bootstrapper_for, consumer_can_publish, create_transport

EXIT_OK = 0
EXIT_BOOTSTRAP_FAILED = 1
EXIT_CONFIG_ERROR = 2


def default_processor(settings: DispatchSettings) -> EventProcessor:
    return DeduplicatingProcessor(EmailNotificationProcessor(LoggingEmailSender(), settings.notify_recipients))


async def run_worker(
    settings: DispatchSettings,
    processor: EventProcessor | None = None,
    *,
    transport: TransportClient | None = None,
    install_signal_handlers: bool = True,
    consumer_ready: asyncio.Future[ConsumerLoop] | None = None,
) -> int:
    log = get_logger(__name__, substrate=settings.substrate)
    transport = transport or create_transport(settings, role="consumer")
    try:
        await bootstrapper_for(transport, settings).bootstrap()
    except BootstrapError as exc:
        log.critical("worker.bootstrap_failed", endpoint=exc.resource, attempts=exc.attempts)
        return EXIT_BOOTSTRAP_FAILED
    except Exception:
        log.exception("worker.provision_failed", endpoint=transport.endpoint)
        return EXIT_BOOTSTRAP_FAILED

    consumer = ConsumerLoop(
        transport,
        processor or default_processor(settings),
        # replay is refused where the consumer side cannot send
        dead_letters=InMemoryDeadLetterStore(
            republish=transport.publish if consumer_can_publish(settings) else None
        ),
        max_deliveries=settings.max_deliveries,
        pull_timeout=settings.pull_timeout,
        idle_sleep=settings.idle_sleep,
    )
    if not transport.capabilities.supports_redelivery:
        log.warning("worker.no_redelivery", detail=transport.capabilities.redelivery_trigger)
    if install_signal_handlers:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, consumer.stop)
    if consumer_ready is not None:
        consumer_ready.set_result(consumer)

    try:
        await consumer.run()
    finally:
        await transport.close()
    log.info("worker.shutdown")
    return EXIT_OK


def main() -> int:
    try:
        settings = DotenvSettingsLoader().load(DispatchSettings)
    except ConfigError as exc:
        JsonLoggerFactory.configure()
        get_logger(__name__).error("worker.config_invalid", **exc.to_dict())
        return EXIT_CONFIG_ERROR
    JsonLoggerFactory.configure(settings.log_level)
    return asyncio.run(run_worker(settings))


if __name__ == "__main__":
    sys.exit(main())
