"""Application bootstrap and runtime wiring."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from notifyy.channels.telegram import TelegramChannel
from notifyy.config.schema import Settings
from notifyy.core.errors import PersistenceError
from notifyy.core.ports import BotGatewayPort, RecipientStorePort
from notifyy.core.registration import RegistrationHandler
from notifyy.core.relay import NotificationRelay
from notifyy.delivery.gate import DeliveryGate
from notifyy.directory.registry import RecipientDirectory
from notifyy.storage.cloudant import CloudantRecipientStore
from notifyy.telemetry import InMemoryTelemetry, PrometheusTelemetry, TelemetryPort
from notifyy.utils.tasks import BackgroundTasks


@dataclass
class Runtime:
    """Every long-lived collaborator of one running service."""

    settings: Settings
    telemetry: TelemetryPort
    directory: RecipientDirectory
    gate: DeliveryGate
    store: RecipientStorePort
    gateway: BotGatewayPort
    tasks: BackgroundTasks
    relay: NotificationRelay
    registration: RegistrationHandler

    def reset(self) -> None:
        """Drop in-memory recipients and send history."""
        self.directory.reset()
        self.gate.reset()


def build_runtime(
    settings: Settings,
    *,
    store: RecipientStorePort | None = None,
    gateway: BotGatewayPort | None = None,
    telemetry: TelemetryPort | None = None,
    clock: Callable[[], float] | None = None,
) -> Runtime:
    """Wire the runtime from settings, allowing collaborators to be swapped in tests."""
    if telemetry is None:
        telemetry = PrometheusTelemetry() if settings.metrics else InMemoryTelemetry()

    def _count_failure(label: str, exc: BaseException) -> None:
        if label.startswith("send:"):
            telemetry.incr("delivery_failures_total")

    tasks = BackgroundTasks(on_failure=_count_failure)
    directory = RecipientDirectory()
    gate_kwargs = {"clock": clock} if clock is not None else {}
    gate = DeliveryGate(
        retention_seconds=settings.retention_seconds,
        tick_seconds=settings.tick_seconds,
        telemetry=telemetry,
        **gate_kwargs,
    )

    if store is None:
        store = CloudantRecipientStore(
            username=settings.database_user,
            password=settings.database_password,
            base_url=settings.database_url,
            database=settings.database_name,
        )
    if gateway is None:
        gateway = TelegramChannel(
            settings.telegram_token,
            api_base=settings.telegram_api_base,
            poll_timeout=settings.telegram_poll_timeout,
        )

    registration = RegistrationHandler(
        directory=directory,
        store=store,
        gateway=gateway,
        tasks=tasks,
        telemetry=telemetry,
    )
    if isinstance(gateway, TelegramChannel):
        gateway.on_event = registration

    relay = NotificationRelay(directory=directory, gate=gate, gateway=gateway, tasks=tasks)
    return Runtime(
        settings=settings,
        telemetry=telemetry,
        directory=directory,
        gate=gate,
        store=store,
        gateway=gateway,
        tasks=tasks,
        relay=relay,
        registration=registration,
    )


async def load_directory(runtime: Runtime) -> int:
    """Populate the directory from the remote store; failures leave it empty."""
    try:
        entries = await runtime.store.load()
    except PersistenceError as e:
        logger.error(f"Recipient load failed, starting with an empty directory: {e}")
        return 0
    added = runtime.directory.merge(entries)
    runtime.telemetry.gauge("directory_recipients", float(len(runtime.directory)))
    return added


async def serve(runtime: Runtime) -> None:
    """Run the HTTP front door and bot polling in one event loop until interrupted."""
    import uvicorn

    from notifyy.api.server import create_app

    settings = runtime.settings
    await load_directory(runtime)

    app = create_app(runtime)
    server = uvicorn.Server(
        uvicorn.Config(app, host=settings.host, port=settings.port, log_level="info")
    )

    poller: asyncio.Task[None] | None = None
    if isinstance(runtime.gateway, TelegramChannel):
        poller = asyncio.create_task(runtime.gateway.start(), name="telegram-poll")

    logger.info(
        f"Service up and running on port {settings.port} "
        f"(retention {runtime.gate.retention_seconds:g}s, tick {runtime.gate.tick_seconds:g}s)"
    )
    try:
        await server.serve()
    finally:
        if poller is not None:
            poller.cancel()
            await asyncio.gather(poller, return_exceptions=True)
        await runtime.tasks.drain()
        if isinstance(runtime.gateway, TelegramChannel):
            await runtime.gateway.stop()
        logger.info("Service stopped")
