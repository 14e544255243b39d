"""Hand-written collaborators shared by the test modules."""

from __future__ import annotations

from notifyy.config.schema import Settings
from notifyy.core.errors import PersistenceError, UpstreamDeliveryError
from notifyy.core.models import RecipientIdentity

TELEGRAM_TOKEN = "123456789:" + "A" * 35


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeStore:
    def __init__(self, entries: dict[str, RecipientIdentity] | None = None) -> None:
        self.entries = dict(entries or {})
        self.persisted: list[tuple[str, RecipientIdentity]] = []
        self.fail_load = False
        self.fail_persist = False

    async def load(self) -> dict[str, RecipientIdentity]:
        if self.fail_load:
            raise PersistenceError("store unavailable")
        return dict(self.entries)

    async def persist(self, token: str, identity: RecipientIdentity) -> None:
        if self.fail_persist:
            raise PersistenceError("write rejected")
        self.persisted.append((token, identity))


class FakeGateway:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.replies: list[tuple[str, str]] = []
        self.fail_send = False

    async def send(self, chat_id: str, text: str) -> None:
        if self.fail_send:
            raise UpstreamDeliveryError("chat not found", status_code=400)
        self.sent.append((chat_id, text))

    async def reply(self, chat_id: str, text: str) -> None:
        self.replies.append((chat_id, text))


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "telegram_token": TELEGRAM_TOKEN,
        "database_user": "notifyy",
        "database_password": "secret",
    }
    values.update(overrides)
    return Settings(**values)
