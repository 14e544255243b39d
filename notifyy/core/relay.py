"""Fan-out of one composed notification to its recipients."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from notifyy.core.models import NotificationRequest
from notifyy.core.ports import BotGatewayPort
from notifyy.delivery.composer import compose_message
from notifyy.delivery.gate import DeliveryGate
from notifyy.directory.registry import RecipientDirectory
from notifyy.utils.tasks import BackgroundTasks


@dataclass(frozen=True, slots=True, kw_only=True)
class RelayOutcome:
    """Per-request tally of what happened to each recipient token."""

    dispatched: int = 0
    suppressed: int = 0
    unknown: int = 0

    @property
    def delivered(self) -> bool:
        return self.dispatched > 0


class NotificationRelay:
    """Resolve tokens, run the delivery gate and dispatch accepted sends.

    Sends are fire-and-forget: the relay never waits for the gateway and a
    failed send never changes the outcome reported to the caller.
    """

    def __init__(
        self,
        *,
        directory: RecipientDirectory,
        gate: DeliveryGate,
        gateway: BotGatewayPort,
        tasks: BackgroundTasks,
    ) -> None:
        self._directory = directory
        self._gate = gate
        self._gateway = gateway
        self._tasks = tasks

    def relay(self, request: NotificationRequest) -> RelayOutcome:
        text = compose_message(
            title=request.title,
            message=request.message,
            code=request.code,
            url=request.url,
        )

        dispatched = suppressed = unknown = 0
        # Repeated tokens are checked independently; the gate suppresses repeats.
        for token in request.recipients:
            identity = self._directory.lookup(token)
            if identity is None:
                unknown += 1
                continue
            if not self._gate.should_send(identity.chat_id, text):
                suppressed += 1
                continue
            dispatched += 1
            self._tasks.spawn(
                self._gateway.send(identity.chat_id, text),
                label=f"send:{identity.chat_id}",
            )

        outcome = RelayOutcome(dispatched=dispatched, suppressed=suppressed, unknown=unknown)
        logger.info(
            f"Relayed notification: dispatched={dispatched} suppressed={suppressed} unknown={unknown}"
        )
        return outcome
