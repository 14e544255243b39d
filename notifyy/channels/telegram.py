"""Telegram Bot API channel (long polling over httpx)."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
from loguru import logger

from notifyy.channels.base import BaseChannel, EventHandler
from notifyy.core.errors import UpstreamDeliveryError
from notifyy.core.models import ChatEvent, ChatId

DEFAULT_API_BASE = "https://api.telegram.org"
POLL_ERROR_BACKOFF_SECONDS = 2.0


class TelegramChannel(BaseChannel):
    """
    Telegram channel.

    Inbound messages are fetched with ``getUpdates`` long polling; outbound
    text goes through ``sendMessage`` with Markdown parsing.
    """

    name = "telegram"

    def __init__(
        self,
        token: str,
        on_event: EventHandler | None = None,
        *,
        api_base: str = DEFAULT_API_BASE,
        poll_timeout: int = 30,
        parse_mode: str = "Markdown",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(on_event)
        self._api_url = f"{api_base.rstrip('/')}/bot{token}"
        self._poll_timeout = max(0, int(poll_timeout))
        self._parse_mode = parse_mode
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(10.0, read=self._poll_timeout + 10.0),
            transport=transport,
        )
        self._offset = 0

    async def start(self) -> None:
        """Poll for updates until stop() is called."""
        self._running = True
        logger.info(f"{self.name} channel polling started")

        while self._running:
            try:
                updates = await self.fetch_updates()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.warning(f"{self.name} poll error: {e}")
                await asyncio.sleep(POLL_ERROR_BACKOFF_SECONDS)
                continue

            for update in updates:
                await self._process_update(update)

        logger.info(f"{self.name} channel polling stopped")

    async def stop(self) -> None:
        self._running = False
        await self._client.aclose()

    async def fetch_updates(self) -> list[dict[str, Any]]:
        """Fetch one batch of updates and advance the offset past it."""
        data = await self._call(
            "getUpdates",
            {
                "offset": self._offset,
                "timeout": self._poll_timeout,
                "allowed_updates": ["message"],
            },
        )
        result = data.get("result") or []
        updates = [u for u in result if isinstance(u, dict)]
        if len(updates) != len(result):
            logger.warning(f"{self.name} skipped {len(result) - len(updates)} malformed updates")
        for update in updates:
            update_id = update.get("update_id")
            if isinstance(update_id, int):
                self._offset = max(self._offset, update_id + 1)
        return updates

    async def send(self, chat_id: ChatId, text: str) -> None:
        await self._call(
            "sendMessage",
            {"chat_id": chat_id, "text": text, "parse_mode": self._parse_mode},
        )

    async def reply(self, chat_id: ChatId, text: str) -> None:
        """Plain-text reply, used for bot conversation rather than notifications."""
        await self._call("sendMessage", {"chat_id": chat_id, "text": text})

    async def _process_update(self, update: dict[str, Any]) -> None:
        event = parse_update(update)
        if event is None:
            return
        try:
            await self._handle_event(event)
        except Exception as e:
            logger.error(f"Telegram event handling failed for chat {event.chat_id}: {e}")

    async def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.post(f"{self._api_url}/{method}", json=payload)
        except httpx.HTTPError as e:
            raise UpstreamDeliveryError(f"Telegram {method} request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if response.status_code >= 400 or not data.get("ok", False):
            description = data.get("description") or response.reason_phrase
            raise UpstreamDeliveryError(
                f"Telegram {method} failed: {description}",
                status_code=response.status_code,
            )
        return data


def parse_update(update: dict[str, Any]) -> ChatEvent | None:
    """Extract a ChatEvent from one ``getUpdates`` entry."""
    message = update.get("message")
    if not isinstance(message, dict):
        return None
    chat = message.get("chat")
    if not isinstance(chat, dict) or chat.get("id") is None:
        return None
    return ChatEvent(
        chat_id=str(chat["id"]),
        username=str(chat.get("username") or ""),
        text=str(message.get("text") or ""),
    )
