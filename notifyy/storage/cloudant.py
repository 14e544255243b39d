"""Cloudant (CouchDB) document store for issued access tokens.

Each recipient is one document ``{"token", "chatId", "username"}`` in the
configured database. Bulk loading reads the ``list/all`` design view, whose
rows carry the document as ``value``.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from notifyy.core.errors import PersistenceError
from notifyy.core.models import RecipientIdentity, Token

DEFAULT_DATABASE_URL = "https://kokarn.cloudant.com"
DEFAULT_DATABASE_NAME = "notifyy-users"
ALL_USERS_VIEW = "_design/list/_view/all"


class CloudantRecipientStore:
    """RecipientStorePort backed by the Cloudant HTTP API."""

    def __init__(
        self,
        *,
        username: str,
        password: str,
        base_url: str = DEFAULT_DATABASE_URL,
        database: str = DEFAULT_DATABASE_NAME,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._auth = httpx.BasicAuth(username, password)
        self._base_url = base_url.rstrip("/")
        self._database = database.strip("/")
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def database_url(self) -> str:
        return f"{self._base_url}/{self._database}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            auth=self._auth,
            timeout=self._timeout_seconds,
            transport=self._transport,
        )

    async def load(self) -> dict[Token, RecipientIdentity]:
        """Fetch every stored recipient.

        Raises:
            PersistenceError: transport failure, non-2xx status or malformed body.
        """
        url = f"{self.database_url}/{ALL_USERS_VIEW}"
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PersistenceError(f"Failed to load recipients from {self._database}: {e}") from e

        entries = _parse_view_rows(payload)
        logger.info(f"Recipient store load complete: {len(entries)} recipients")
        return entries

    async def persist(self, token: Token, identity: RecipientIdentity) -> None:
        """Write one recipient document; Cloudant answers 201 on success."""
        document = {
            "token": token,
            "chatId": identity.chat_id,
            "username": identity.username,
        }
        try:
            async with self._client() as client:
                response = await client.post(f"{self.database_url}/", json=document)
        except httpx.HTTPError as e:
            raise PersistenceError(f"Failed to store {identity.username}: {e}") from e

        if response.status_code != 201:
            raise PersistenceError(
                f"Failed to store {identity.username}: got status {response.status_code}"
            )
        logger.info(f"Recipient {identity.username} added to storage")


def _parse_view_rows(payload: Any) -> dict[Token, RecipientIdentity]:
    if not isinstance(payload, dict):
        raise PersistenceError("Recipient view response is not an object")
    rows = payload.get("rows")
    if not isinstance(rows, list):
        raise PersistenceError("Recipient view response has no rows")

    entries: dict[Token, RecipientIdentity] = {}
    for row in rows:
        value = row.get("value") if isinstance(row, dict) else None
        if not isinstance(value, dict):
            continue
        token = str(value.get("token") or "").strip()
        if not token:
            continue
        entries[token] = RecipientIdentity(
            chat_id=str(value.get("chatId") or ""),
            username=str(value.get("username") or ""),
        )
    return entries
