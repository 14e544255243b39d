"""Port interfaces between the relay core and its collaborators."""

from __future__ import annotations

from typing import Protocol

from notifyy.core.models import ChatId, RecipientIdentity, Token


class RecipientStorePort(Protocol):
    """Remote persistence for issued tokens."""

    async def load(self) -> dict[Token, RecipientIdentity]:
        """Bulk-fetch every stored token/identity pair."""

    async def persist(self, token: Token, identity: RecipientIdentity) -> None:
        """Write one newly issued token/identity pair."""


class BotGatewayPort(Protocol):
    """Outbound send primitive of the chat backend."""

    async def send(self, chat_id: ChatId, text: str) -> None:
        """Deliver ``text`` to one chat destination."""

    async def reply(self, chat_id: ChatId, text: str) -> None:
        """Plain-text conversational reply to one chat."""
