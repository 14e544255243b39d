"""Bot registration flow: hand out access tokens to chats that message the bot."""

from __future__ import annotations

from loguru import logger

from notifyy.core.models import ChatEvent, RecipientIdentity, Token
from notifyy.core.ports import BotGatewayPort, RecipientStorePort
from notifyy.directory.registry import RecipientDirectory, mint_token
from notifyy.telemetry.base import TelemetryPort
from notifyy.utils.tasks import BackgroundTasks

WELCOME_NEW = "Congrats! You are now added to the bot. Use the token \n{token}\n to authenticate."
WELCOME_BACK = "Welcome back! Your access token is \n{token}"


class RegistrationHandler:
    """Handle inbound chat events by issuing (or re-issuing) an access token.

    Token issuance is idempotent per display identity for the lifetime of the
    in-memory directory. Persistence is fire-and-forget: a failed write is
    logged and the in-memory directory keeps the new recipient.
    """

    def __init__(
        self,
        *,
        directory: RecipientDirectory,
        store: RecipientStorePort,
        gateway: BotGatewayPort,
        tasks: BackgroundTasks,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        self._directory = directory
        self._store = store
        self._gateway = gateway
        self._tasks = tasks
        self._telemetry = telemetry

    async def __call__(self, event: ChatEvent) -> Token:
        identity = RecipientIdentity(chat_id=event.chat_id, username=event.username)

        token = self._directory.token_for(identity)
        if token is not None:
            self._metric("existing")
            self._tasks.spawn(
                self._gateway.reply(event.chat_id, WELCOME_BACK.format(token=token)),
                label=f"reply:{event.chat_id}",
            )
            return token

        token = mint_token()
        self._directory.add(token, identity)
        logger.info(f"Adding {identity.username or identity.chat_id} to recipients")
        self._metric("new")

        self._tasks.spawn(self._store.persist(token, identity), label=f"persist:{token[:8]}")
        self._tasks.spawn(
            self._gateway.reply(event.chat_id, WELCOME_NEW.format(token=token)),
            label=f"reply:{event.chat_id}",
        )
        return token

    def _metric(self, outcome: str) -> None:
        if self._telemetry is None:
            return
        self._telemetry.incr("registrations_total", labels=(("outcome", outcome),))
        self._telemetry.gauge("directory_recipients", float(len(self._directory)))
